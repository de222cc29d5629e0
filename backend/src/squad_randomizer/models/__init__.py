"""Data models for the squad randomizer."""

from squad_randomizer.models.player import (
    TEAM_IDS,
    Player,
    Squad,
    TeamUpdate,
    is_valid_team,
    reconcile_players,
)
from squad_randomizer.models.group import Assignment, Group, GroupKind
from squad_randomizer.models.command import (
    ChatCommandEvent,
    CommandOutcome,
    CommandStatus,
    RandomizeResult,
)

__all__ = [
    "TEAM_IDS",
    "Player",
    "Squad",
    "TeamUpdate",
    "is_valid_team",
    "reconcile_players",
    "Assignment",
    "Group",
    "GroupKind",
    "ChatCommandEvent",
    "CommandOutcome",
    "CommandStatus",
    "RandomizeResult",
]
