"""Tests for chat command API routes."""

import random

import httpx
import pytest
from factories import make_player

from squad_randomizer.config import Settings
from squad_randomizer.main import app
from squad_randomizer.services.game_server import InMemoryGameServer
from squad_randomizer.services.randomizer_service import SquadRandomizer

pytestmark = pytest.mark.anyio


@pytest.fixture
def game_server():
    players = [
        *[make_player(f"Sq{i}", team_id=1, squad_id=1) for i in range(3)],
        *[make_player(f"Solo{i}", team_id=1) for i in range(3)],
    ]
    return InMemoryGameServer(players=players)


@pytest.fixture
async def client(game_server):
    """Create async test client with an in-memory game server."""
    # Set services directly on app.state (mimics lifespan startup)
    app.state.game_server = game_server
    app.state.randomizer = SquadRandomizer(
        roster=game_server,
        switcher=game_server,
        messenger=game_server,
        settings=Settings(_env_file=None),
        rng=random.Random(0),
    )

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    del app.state.randomizer
    del app.state.game_server


class TestChatCommand:
    """Tests for POST /api/commands/chat."""

    async def test_admin_command_runs_randomizer(self, client, game_server):
        response = await client.post(
            "/api/commands/chat",
            json={"chat": "ChatAdmin", "command": "squadrandomize", "name": "Admin", "eos_id": "eos_admin"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "completed"
        assert data["summary"] == "Team 1 = 3 players, Team 2 = 3 players."
        assert data["switches"] == 3
        assert len(game_server.broadcasts) == 2

    async def test_public_chat_is_ignored(self, client, game_server):
        response = await client.post(
            "/api/commands/chat",
            json={"chat": "ChatAll", "command": "squadrandomize", "steam_id": "7656"},
        )

        assert response.status_code == 200
        assert response.json()["status"] == "ignored"
        assert game_server.switch_calls == []

    async def test_other_command_is_ignored(self, client, game_server):
        response = await client.post(
            "/api/commands/chat",
            json={"chat": "ChatAdmin", "command": "skipmap", "steam_id": "7656"},
        )

        assert response.json()["status"] == "ignored"
        assert game_server.refresh_count == 0

    async def test_ignored_command_has_full_response_shape(self, client, game_server):
        """Filtering happens in the randomizer, so every reply carries the same fields."""
        response = await client.post(
            "/api/commands/chat",
            json={"chat": "ChatAdmin", "command": "skipmap", "steam_id": "7656"},
        )

        assert response.json() == {"status": "ignored", "summary": "", "switches": 0}

    async def test_configured_command_name_is_honored(self, client, game_server):
        app.state.randomizer.settings.command = "shuffle"

        response = await client.post(
            "/api/commands/chat",
            json={"chat": "ChatAdmin", "command": "shuffle", "steam_id": "7656"},
        )

        assert response.json()["status"] == "completed"

    async def test_failure_reported_not_raised(self, client, game_server):
        game_server.fail_on.update(p.identifier for p in game_server.players())

        response = await client.post(
            "/api/commands/chat",
            json={"chat": "ChatAdmin", "command": "squadrandomize", "steam_id": "7656"},
        )

        assert response.status_code == 200
        assert response.json()["status"] == "failed"
        assert game_server.warnings[-1][0] == "7656"

    async def test_invalid_body_rejected(self, client):
        response = await client.post("/api/commands/chat", json={"command": "squadrandomize"})

        assert response.status_code == 422


class TestMisc:
    async def test_list_commands(self, client):
        response = await client.get("/api/commands")

        assert response.status_code == 200
        assert response.json()["commands"][0]["command"] == "squadrandomize"
        assert response.json()["commands"][0]["chat"] == "ChatAdmin"

    async def test_health(self, client):
        response = await client.get("/health")

        assert response.json() == {"status": "healthy", "service": "squad-randomizer"}


async def test_uninitialized_randomizer_returns_503():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/commands")

    assert response.status_code == 503
