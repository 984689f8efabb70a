"""
PokerArena Server - FastAPI + WebSocket Server Layer
"""

from pokerarena.server.app import app, create_app

__all__ = ["app", "create_app"]
