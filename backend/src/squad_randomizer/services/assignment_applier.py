"""Applies a team assignment to the game server with as few switches as possible."""

import logging
from typing import Optional

from squad_randomizer.exceptions import RemoteSwitchError
from squad_randomizer.models.group import Assignment
from squad_randomizer.models.player import TeamUpdate
from squad_randomizer.services.game_server import TeamSwitcher
from squad_randomizer.services.run_diagnostics import RunDiagnostics

logger = logging.getLogger(__name__)


class AssignmentApplier:
    """Issues team switches for players not already on their target team.

    Switches are awaited one at a time in assignment order (team 1 first,
    then team 2). The first failure stops the walk; switches already made
    stay in place.
    """

    def __init__(self, switcher: TeamSwitcher, diagnostics: Optional[RunDiagnostics] = None):
        self.switcher = switcher
        self.diagnostics = diagnostics

    async def apply(self, assignment: Assignment) -> list[TeamUpdate]:
        """Move every member to its assigned team.

        Returns:
            One TeamUpdate per switch the server acknowledged

        Raises:
            RemoteSwitchError: When a switch fails; carries the updates so far
        """
        updates: list[TeamUpdate] = []
        recorded: dict[str, Optional[int]] = {}

        for team_id, group, player in assignment.iter_members():
            identifier = player.identifier
            if not identifier:
                logger.warning(f"{player.display_name} in {group.label} has no identifier, skipping")
                continue

            current_team = recorded.get(identifier, player.team_id)
            if current_team == team_id:
                continue

            try:
                await self.switcher.switch_team(identifier)
            except Exception as e:
                if self.diagnostics:
                    self.diagnostics.log_switch(identifier, player.name, current_team, team_id, ok=False)
                raise RemoteSwitchError(player, applied=updates, reason=str(e)) from e

            recorded[identifier] = team_id
            updates.append(
                TeamUpdate(
                    identifier=identifier,
                    name=player.name,
                    previous_team=current_team,
                    team_id=team_id,
                )
            )
            if self.diagnostics:
                self.diagnostics.log_switch(identifier, player.name, current_team, team_id, ok=True)
            logger.debug(f"Switched {player.display_name} to team {team_id}")

        logger.info(f"Applied assignment with {len(updates)} team switches")
        return updates
