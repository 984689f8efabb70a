#!/usr/bin/env python3
"""
PokerArena - Server Startup Script

Usage:
    python run.py [--host HOST] [--port PORT] [--reload]

Defaults come from POKERARENA_HOST and POKERARENA_PORT.
"""

from pokerarena.server.app import main


if __name__ == "__main__":
    main()
