"""Game server capabilities used by the randomizer.

Provides both a real client for the admin bridge in front of the server's
RCON and an in-memory server for testing/development.
"""

import logging
from typing import Iterable, Optional, Protocol

import httpx

from squad_randomizer.models.player import Player, Squad, TeamUpdate, reconcile_players

logger = logging.getLogger(__name__)


class RosterProvider(Protocol):
    """Source of the authoritative player and squad lists."""

    async def refresh(self) -> None: ...

    def players(self) -> list[Player]: ...

    def squads(self) -> list[Squad]: ...

    def apply_updates(self, updates: Iterable[TeamUpdate]) -> None: ...


class TeamSwitcher(Protocol):
    """Moves a player to the other team."""

    async def switch_team(self, identifier: str) -> None: ...


class MessagingSink(Protocol):
    """In-game messages."""

    async def broadcast(self, text: str) -> None: ...

    async def warn(self, identifier: str, text: str) -> None: ...


def _optional_int(value) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_player(raw: dict) -> Player:
    """Build a Player from the bridge's JSON payload."""
    return Player(
        name=str(raw.get("name") or ""),
        team_id=_optional_int(raw.get("teamID")),
        squad_id=_optional_int(raw.get("squadID")),
        eos_id=raw.get("eosID") or None,
        steam_id=raw.get("steamID") or None,
    )


def parse_squad(raw: dict) -> Optional[Squad]:
    team_id = _optional_int(raw.get("teamID"))
    squad_id = _optional_int(raw.get("squadID"))
    if team_id is None or squad_id is None:
        return None
    return Squad(team_id=team_id, squad_id=squad_id, name=str(raw.get("squadName") or ""))


class InMemoryGameServer:
    """In-memory game server with a fixed roster.

    Use this for testing and development when no admin bridge is running.
    Every remote call is recorded so tests can assert on it.
    """

    def __init__(
        self,
        players: Optional[list[Player]] = None,
        squads: Optional[list[Squad]] = None,
    ):
        self._players: list[Player] = list(players or [])
        self._squads: list[Squad] = list(squads or [])
        self.switch_calls: list[str] = []
        self.broadcasts: list[str] = []
        self.warnings: list[tuple[str, str]] = []
        self.refresh_count = 0
        self.fail_on: set[str] = set()

    async def refresh(self) -> None:
        self.refresh_count += 1

    def players(self) -> list[Player]:
        return list(self._players)

    def squads(self) -> list[Squad]:
        return list(self._squads)

    def apply_updates(self, updates: Iterable[TeamUpdate]) -> None:
        self._players = reconcile_players(self._players, updates)

    async def switch_team(self, identifier: str) -> None:
        self.switch_calls.append(identifier)
        if identifier in self.fail_on:
            raise RuntimeError(f"Server rejected team switch for {identifier}")
        logger.info(f"InMemoryGameServer: switched {identifier}")

    async def broadcast(self, text: str) -> None:
        self.broadcasts.append(text)

    async def warn(self, identifier: str, text: str) -> None:
        self.warnings.append((identifier, text))


class GameServerClient:
    """Client for the HTTP admin bridge in front of the game server's RCON."""

    def __init__(self, base_url: str, token: str = "", timeout: float = 10.0):
        """Initialize the bridge client.

        Args:
            base_url: Bridge root URL, e.g. http://localhost:3000/api
            token: Optional bearer token for the bridge
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None
        self._players: list[Player] = []
        self._squads: list[Squad] = []

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def refresh(self) -> None:
        """Fetch the current player and squad lists from the server."""
        client = await self._get_client()

        response = await client.get("/players")
        response.raise_for_status()
        self._players = [parse_player(raw) for raw in response.json()]

        response = await client.get("/squads")
        response.raise_for_status()
        self._squads = [s for s in (parse_squad(raw) for raw in response.json()) if s]

        logger.info(f"Roster refreshed: {len(self._players)} players, {len(self._squads)} squads")

    def players(self) -> list[Player]:
        return list(self._players)

    def squads(self) -> list[Squad]:
        return list(self._squads)

    def apply_updates(self, updates: Iterable[TeamUpdate]) -> None:
        self._players = reconcile_players(self._players, updates)

    async def switch_team(self, identifier: str) -> None:
        client = await self._get_client()
        response = await client.post(f"/players/{identifier}/switch-team")
        response.raise_for_status()

    async def broadcast(self, text: str) -> None:
        client = await self._get_client()
        response = await client.post("/broadcast", json={"message": text})
        response.raise_for_status()

    async def warn(self, identifier: str, text: str) -> None:
        client = await self._get_client()
        response = await client.post(f"/players/{identifier}/warn", json={"message": text})
        response.raise_for_status()


def get_game_server(
    base_url: Optional[str] = None,
    token: str = "",
    timeout: float = 10.0,
    use_mock: bool = False,
) -> InMemoryGameServer | GameServerClient:
    """Factory function to get the appropriate game server implementation.

    Args:
        base_url: Admin bridge URL
        token: Bridge bearer token
        timeout: Request timeout in seconds
        use_mock: Force use of the in-memory server

    Returns:
        GameServerClient or InMemoryGameServer
    """
    if use_mock or not base_url:
        logger.info("Using InMemoryGameServer")
        return InMemoryGameServer()
    logger.info(f"Using GameServerClient at {base_url}")
    return GameServerClient(base_url, token=token, timeout=timeout)
