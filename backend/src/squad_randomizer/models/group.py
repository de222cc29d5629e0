"""Cohesion groups and team assignments."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Iterator

from squad_randomizer.models.player import TEAM_IDS, Player, TeamUpdate, reconcile_players


class GroupKind(str, Enum):
    """How a group was formed."""

    SQUAD = "squad"  # All members of one squad on one team
    SOLO = "solo"  # A single player without a squad


@dataclass
class Group:
    """Players that must end up on the same team."""

    players: list[Player]
    label: str
    roll: float  # Tie-break value in [0, 1)
    kind: GroupKind = GroupKind.SOLO
    key: str = ""  # "<team>:<squad>" for squad groups

    @property
    def size(self) -> int:
        return len(self.players)


@dataclass
class Assignment:
    """Groups placed on each team, plus the resulting team sizes."""

    teams: dict[int, list[Group]] = field(default_factory=lambda: {t: [] for t in TEAM_IDS})
    team_sizes: dict[int, int] = field(default_factory=lambda: {t: 0 for t in TEAM_IDS})

    def place(self, team_id: int, group: Group) -> None:
        self.teams[team_id].append(group)
        self.team_sizes[team_id] += group.size

    def iter_members(self) -> Iterator[tuple[int, Group, Player]]:
        """Yield (target team, group, player) in application order."""
        for team_id in TEAM_IDS:
            for group in self.teams[team_id]:
                for player in group.players:
                    yield team_id, group, player

    @property
    def total_players(self) -> int:
        return sum(self.team_sizes.values())

    def reconciled(self, updates: Iterable[TeamUpdate]) -> "Assignment":
        """Return a copy whose members carry the teams from ``updates``."""
        updates = list(updates)
        teams = {
            team_id: [replace(g, players=reconcile_players(g.players, updates)) for g in groups]
            for team_id, groups in self.teams.items()
        }
        return Assignment(teams=teams, team_sizes=dict(self.team_sizes))
