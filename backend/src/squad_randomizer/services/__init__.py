"""Business logic services."""

from squad_randomizer.services.game_server import (
    GameServerClient,
    InMemoryGameServer,
    get_game_server,
)
from squad_randomizer.services.group_builder import build_groups
from squad_randomizer.services.group_assigner import assign_groups
from squad_randomizer.services.assignment_applier import AssignmentApplier
from squad_randomizer.services.randomizer_service import SquadRandomizer

__all__ = [
    "GameServerClient",
    "InMemoryGameServer",
    "get_game_server",
    "build_groups",
    "assign_groups",
    "AssignmentApplier",
    "SquadRandomizer",
]
