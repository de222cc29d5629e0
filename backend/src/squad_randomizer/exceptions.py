"""Errors raised while randomizing teams."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from squad_randomizer.models.player import Player, TeamUpdate


class RandomizerError(Exception):
    """Base class for randomizer failures."""


class NoEligiblePlayersError(RandomizerError):
    """The roster has no player with an identifier and a valid team."""

    def __init__(self, message: str = "No eligible players on the roster"):
        super().__init__(message)


class NoGroupsError(RandomizerError):
    """Grouping produced nothing to assign."""

    def __init__(self, message: str = "No valid groups found"):
        super().__init__(message)


class RemoteSwitchError(RandomizerError):
    """A remote team switch failed part way through applying an assignment.

    Switches issued before the failure are not rolled back; ``applied`` lists
    them so callers can reconcile their roster.
    """

    def __init__(
        self,
        player: Player,
        applied: Optional[list[TeamUpdate]] = None,
        reason: str = "",
    ):
        self.player = player
        self.applied = list(applied or [])
        self.reason = reason
        detail = f"Failed to switch {player.name or player.identifier}"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(f"{detail} ({len(self.applied)} switches already applied)")
