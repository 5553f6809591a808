"""
Tic-tac-toe relay: HTTP health check и WebSocket.
"""
import logging

import uvicorn
from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from .config import get_config
from .coordinator import SessionCoordinator
from .pairing import Matchmaker, SessionRegistry
from .ws_handlers import ws_loop
from .ws_manager import WSManager

config = get_config()

logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def create_app(strict_symbols: bool | None = None) -> FastAPI:
    """Собрать приложение; всё состояние игр живёт в объектах этого вызова."""
    config = get_config()
    if strict_symbols is None:
        strict_symbols = config.strict_symbols
    app = FastAPI(title="Tic-tac-toe relay")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    manager = WSManager()
    registry = SessionRegistry()
    matchmaker = Matchmaker(registry, manager)
    coordinator = SessionCoordinator(registry, matchmaker, manager, strict_symbols=strict_symbols)
    app.state.manager = manager
    app.state.registry = registry
    app.state.matchmaker = matchmaker
    app.state.coordinator = coordinator

    @app.get("/health")
    def health():
        return {
            "status": "ok",
            "sessions": len(registry),
            "waiting": matchmaker.waiting is not None,
        }

    @app.websocket("/ws")
    async def websocket_endpoint(ws: WebSocket):
        logger.info("WS: connection attempt from %s", ws.client)
        await ws_loop(ws, manager, matchmaker, coordinator)

    return app


app = create_app()


def run() -> None:
    logger.info("Starting server on %s:%s", config.host, config.port)
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    run()
