"""Player and squad roster models."""

from dataclasses import dataclass, replace
from typing import Iterable, Optional

# The two playable teams on the game server
TEAM_IDS = (1, 2)


def is_valid_team(team_id: Optional[int]) -> bool:
    """True for team ids the randomizer balances (1 or 2)."""
    return team_id in TEAM_IDS


@dataclass(frozen=True)
class Player:
    """Snapshot of a connected player as reported by the game server."""

    name: str
    team_id: Optional[int] = None
    squad_id: Optional[int] = None
    eos_id: Optional[str] = None
    steam_id: Optional[str] = None

    @property
    def identifier(self) -> Optional[str]:
        """Handle used for remote admin commands (EOS id preferred)."""
        return self.eos_id or self.steam_id

    @property
    def display_name(self) -> str:
        return self.name or self.identifier or "unknown"


@dataclass(frozen=True)
class Squad:
    """A squad on one team. Squad ids are only unique within a team."""

    team_id: int
    squad_id: int
    name: str = ""


@dataclass(frozen=True)
class TeamUpdate:
    """A team switch that the game server acknowledged."""

    identifier: str
    name: str
    previous_team: Optional[int]
    team_id: int


def reconcile_players(players: Iterable[Player], updates: Iterable[TeamUpdate]) -> list[Player]:
    """Return the roster snapshot with acknowledged team switches applied."""
    new_teams = {u.identifier: u.team_id for u in updates}
    return [
        replace(p, team_id=new_teams[p.identifier]) if p.identifier in new_teams else p
        for p in players
    ]
