"""
PokerArena match server.

Serves the /api match routes and streams arena events over /ws.
"""

import argparse
import logging
import os

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pokerarena import __version__
from pokerarena.server.routes import router
from pokerarena.server.websocket import websocket_endpoint

logging.basicConfig(
    level=os.environ.get("POKERARENA_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="PokerArena", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    app.websocket("/ws")(websocket_endpoint)

    @app.get("/")
    async def index():
        return {"name": "PokerArena", "version": __version__, "docs": "/docs", "events": "/ws"}

    return app


app = create_app()


def main(argv=None):
    """Parse --host/--port/--reload and serve the app with uvicorn."""
    parser = argparse.ArgumentParser(description="PokerArena Server")
    parser.add_argument("--host", default=os.environ.get("POKERARENA_HOST", "0.0.0.0"),
                        help="Host to bind to")
    parser.add_argument("--port", type=int, default=int(os.environ.get("POKERARENA_PORT", "8000")),
                        help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    args = parser.parse_args(argv)

    logger.info(f"Serving PokerArena on {args.host}:{args.port}")
    uvicorn.run(
        "pokerarena.server.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
