"""Squad-preserving team randomizer.

Ties the group builder, group assigner and assignment applier together and
handles the admin chat command that triggers a run.
"""

import logging
import random
import uuid
from typing import Iterable, Optional

from squad_randomizer.config import Settings
from squad_randomizer.exceptions import NoEligiblePlayersError, NoGroupsError, RemoteSwitchError
from squad_randomizer.models.command import (
    ChatCommandEvent,
    CommandOutcome,
    CommandStatus,
    RandomizeResult,
)
from squad_randomizer.models.player import Player, Squad, is_valid_team
from squad_randomizer.services.assignment_applier import AssignmentApplier
from squad_randomizer.services.game_server import MessagingSink, RosterProvider, TeamSwitcher
from squad_randomizer.services.group_assigner import assign_groups
from squad_randomizer.services.group_builder import build_groups
from squad_randomizer.services.run_diagnostics import RunDiagnostics

logger = logging.getLogger(__name__)


def eligible_players(players: Iterable[Player]) -> list[Player]:
    """Players that can be balanced: reachable by id and on team 1 or 2."""
    return [p for p in players if p.identifier and is_valid_team(p.team_id)]


class SquadRandomizer:
    """Randomizes teams while keeping squad members together."""

    def __init__(
        self,
        roster: RosterProvider,
        switcher: TeamSwitcher,
        messenger: MessagingSink,
        settings: Settings,
        rng: Optional[random.Random] = None,
        diagnostics: Optional[RunDiagnostics] = None,
    ):
        """Initialize the randomizer.

        Args:
            roster: Source of the current players and squads
            switcher: Remote team-switch operation
            messenger: In-game broadcast/warn messages
            settings: Command name, admin channel and message texts
            rng: Random source for tie-breaks (seed it for reproducible runs)
            diagnostics: Operator-only recorder for run details
        """
        self.roster = roster
        self.switcher = switcher
        self.messenger = messenger
        self.settings = settings
        self.rng = rng or random.Random()
        self.diagnostics = diagnostics or RunDiagnostics(enabled=False)

    def format_summary(self, team_sizes: dict[int, int]) -> str:
        return self.settings.summary_template.format(team1=team_sizes[1], team2=team_sizes[2])

    async def randomize_teams(
        self,
        players: Iterable[Player],
        squads: Optional[Iterable[Squad]] = None,
        diagnostics: Optional[RunDiagnostics] = None,
    ) -> RandomizeResult:
        """Build groups, split them across teams and apply the result.

        Args:
            players: Roster snapshot to balance
            squads: Squad records used for group labels
            diagnostics: Recorder for this run; defaults to the shared one

        Raises:
            NoGroupsError: If no player has a valid team
            RemoteSwitchError: If a team switch fails part way through
        """
        groups = build_groups(players, self.rng, squads=squads)
        if not groups:
            raise NoGroupsError()
        diagnostics = diagnostics or self.diagnostics
        diagnostics.log_groups(groups)

        assignment = assign_groups(groups, self.rng)
        diagnostics.log_assignment(assignment)
        logger.info(
            f"Assigned {len(groups)} groups: team 1 = {assignment.team_sizes[1]}, "
            f"team 2 = {assignment.team_sizes[2]}"
        )

        updates = await AssignmentApplier(self.switcher, diagnostics=diagnostics).apply(assignment)
        return RandomizeResult(
            assignment=assignment,
            updates=updates,
            summary=self.format_summary(assignment.team_sizes),
        )

    def is_trigger(self, event: ChatCommandEvent) -> bool:
        """True if the event is our command sent in the admin channel."""
        return event.command == self.settings.command and event.chat == self.settings.admin_chat

    async def handle_command(self, event: ChatCommandEvent) -> CommandOutcome:
        """Handle a chat command event end to end.

        Failures never propagate: they are logged in full and the operator
        gets a generic notice.
        """
        if not self.is_trigger(event):
            return CommandOutcome(status=CommandStatus.IGNORED)

        operator = event.sender_id
        run_id = f"run_{uuid.uuid4().hex[:12]}"
        logger.info(f"Randomizer {run_id} triggered by {event.name or operator}")

        run = self.diagnostics.start_run(run_id, operator=operator)
        try:
            await self.roster.refresh()
            players = eligible_players(self.roster.players())
            run.log_roster(len(players))
            if not players:
                raise NoEligiblePlayersError()

            await self.messenger.broadcast(self.settings.start_message)
            result = await self.randomize_teams(players, squads=self.roster.squads(), diagnostics=run)
            self.roster.apply_updates(result.updates)
            await self.messenger.broadcast(self.settings.done_message)
            await self._notify(operator, result.summary)
        except (NoEligiblePlayersError, NoGroupsError) as e:
            logger.info(f"Randomizer {run_id}: {e}")
            await self._notify(operator, self.settings.no_players_message)
            self._finish(run, CommandStatus.NO_PLAYERS, error=e)
            return CommandOutcome(status=CommandStatus.NO_PLAYERS, summary=self.settings.no_players_message)
        except Exception as e:
            logger.exception(f"Randomizer {run_id} failed")
            switches = 0
            if isinstance(e, RemoteSwitchError):
                self.roster.apply_updates(e.applied)
                switches = len(e.applied)
            await self._notify(operator, self.settings.failure_message)
            self._finish(run, CommandStatus.FAILED, error=e)
            return CommandOutcome(status=CommandStatus.FAILED, summary=self.settings.failure_message, switches=switches)

        self._finish(run, CommandStatus.COMPLETED, summary=result.summary)
        logger.info(f"Randomizer {run_id} done: {result.summary}")
        return CommandOutcome(
            status=CommandStatus.COMPLETED,
            summary=result.summary,
            switches=len(result.updates),
        )

    def _finish(
        self,
        run: RunDiagnostics,
        status: CommandStatus,
        summary: str = "",
        error: Optional[BaseException] = None,
    ):
        if error is not None:
            run.log_error(error)
        run.end_run(status.value, summary)
        run.save()

    async def _notify(self, operator: Optional[str], text: str) -> None:
        """Warn the invoking operator; a failed warning is only logged."""
        if not operator:
            logger.warning(f"No operator id to notify: {text}")
            return
        try:
            await self.messenger.warn(operator, text)
        except Exception as e:
            logger.error(f"Failed to notify {operator}: {e}")
