"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from squad_randomizer.config import settings
from squad_randomizer.api.routes.commands import router as commands_router
from squad_randomizer.services.game_server import GameServerClient, get_game_server
from squad_randomizer.services.randomizer_service import SquadRandomizer
from squad_randomizer.services.run_diagnostics import RunDiagnostics

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def get_diagnostics_dir() -> Path | None:
    """Get the diagnostics directory from settings (None = default location)."""
    if not settings.diagnostics_dir:
        return None
    path = Path(settings.diagnostics_dir)
    if path.is_absolute():
        return path
    # Relative path - resolve from repo root
    return Path(__file__).parent.parent.parent.parent / path


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup: connect to the game server and build the randomizer
    if not hasattr(app.state, "game_server"):
        app.state.game_server = get_game_server(
            settings.game_server_url,
            token=settings.game_server_token,
            timeout=settings.game_server_timeout,
        )
    if not hasattr(app.state, "randomizer"):
        server = app.state.game_server
        app.state.randomizer = SquadRandomizer(
            roster=server,
            switcher=server,
            messenger=server,
            settings=settings,
            diagnostics=RunDiagnostics(
                output_dir=get_diagnostics_dir(),
                enabled=settings.diagnostics_enabled,
            ),
        )
    yield
    # Shutdown: close the bridge connection
    if isinstance(app.state.game_server, GameServerClient):
        await app.state.game_server.close()


app = FastAPI(
    title="Squad Randomizer",
    description="Randomizes teams on a game server while keeping squads together",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for admin tooling
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "squad-randomizer"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Squad Randomizer API",
        "version": "0.1.0",
        "docs": "/docs",
    }


# Register routers
app.include_router(commands_router)
