"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from skirmish import __version__
from skirmish.api.battle_manager import BattleManager
from skirmish.api.dependencies import set_battle_manager
from skirmish.api.routes import api_router
from skirmish.config import BattleConfig
from skirmish.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: BattleConfig | None = None) -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    if config is None:
        config = BattleConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        manager = BattleManager(_config)
        set_battle_manager(manager)
        logger.info("API server started.")
        yield
        manager.shutdown()
        set_battle_manager(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Skirmish Battle Resolver",
        description=(
            "Deterministic tick-based grid battle resolver with replayable event logs.\n\n"
            "## API Groups\n\n"
            "- **Battles** — Resolve battles, read event logs, reconstruct the board at any tick\n"
            "- **Playback** — Real-time replay of a resolved battle: start, pause, resume, step, reset\n"
            "- **Setup** — Pre-battle placement board and the agent command relay\n"
            "- **Config** — Read-only battle configuration\n"
            "- **Metadata** — Unit archetype table and enum vocabularies\n"
        ),
        version=__version__,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Battles", "description": "Resolve a battle input and read its immutable output: result, events, and reconstructed board state."},
            {"name": "Playback", "description": "Drive a replay cursor over a resolved battle at 10, 20 or 40 ticks per second."},
            {"name": "Setup", "description": "Place and remove units before a battle; external agents send placeUnit commands here."},
            {"name": "Config", "description": "Read-only battle configuration (board size, tile caps, deployment zones, timing)."},
            {"name": "Metadata", "description": "The fixed unit archetype table and all enum vocabularies used on the wire."},
        ],
    )

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app
