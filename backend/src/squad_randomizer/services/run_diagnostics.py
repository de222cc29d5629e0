"""Diagnostic recording of randomizer runs.

Captures what each run grouped, assigned and switched, plus any error with
its full detail, so operators can inspect a run after the fact. Nothing
recorded here is shown to players.

Usage:
    from squad_randomizer.services.run_diagnostics import RunDiagnostics

    diagnostics = RunDiagnostics()
    run = diagnostics.start_run("run-123", operator="7656119...")
    run.log_roster(80)
    run.log_groups(groups)
    run.log_assignment(assignment)
    run.save()
"""
import copy
import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from squad_randomizer.models.group import Assignment, Group

# Configure module logger
module_logger = logging.getLogger("squad_randomizer.diagnostics")


class RunDiagnostics:
    """Captures per-run diagnostics as JSON files."""

    def __init__(self, output_dir: Optional[Path] = None, enabled: bool = True):
        """Initialize run diagnostics.

        Args:
            output_dir: Directory to save diagnostic files. Defaults to logs/randomizer/
            enabled: Whether recording is active. Can be controlled via RANDOMIZER_DIAGNOSTICS env var.
        """
        # Check environment variable for override
        env_enabled = os.environ.get("RANDOMIZER_DIAGNOSTICS", "").lower()
        if env_enabled == "true":
            enabled = True
        elif env_enabled == "false":
            enabled = False

        self.enabled = enabled
        self.output_dir = output_dir or Path(__file__).parents[4] / "logs" / "randomizer"
        self.entries: list[dict] = []
        self.run_id: str = ""

        if self.enabled:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            module_logger.info(f"Randomizer diagnostics enabled, output dir: {self.output_dir}")

    def _append(self, event: str, **data) -> None:
        if not self.enabled:
            return
        self.entries.append({
            "event": event,
            "timestamp": datetime.now().isoformat(),
            **data,
        })

    def start_run(self, run_id: str, operator: Optional[str] = None) -> "RunDiagnostics":
        """Begin recording a run in a recorder of its own.

        The returned recorder saves to the same directory as this one but
        keeps its own entries, so overlapping runs never share a record.
        """
        run = copy.copy(self)
        run.run_id = run_id
        run.entries = []
        run._append("run_start", run_id=run_id, operator=operator)
        return run

    def log_roster(self, player_count: int):
        """Log how many eligible players the refreshed roster had."""
        self._append("roster", player_count=player_count)

    def log_groups(self, groups: Iterable[Group]):
        """Log the cohesion groups built for this run."""
        self._append(
            "groups",
            groups=[
                {"label": g.label, "kind": g.kind.value, "size": g.size, "roll": round(g.roll, 4)}
                for g in groups
            ],
        )

    def log_assignment(self, assignment: Assignment):
        """Log which groups went to which team."""
        self._append(
            "assignment",
            team_sizes={str(t): size for t, size in assignment.team_sizes.items()},
            teams={str(t): [g.label for g in groups] for t, groups in assignment.teams.items()},
        )

    def log_switch(
        self,
        identifier: str,
        name: str,
        previous_team: Optional[int],
        team_id: int,
        ok: bool,
    ):
        """Log one remote team switch attempt."""
        self._append(
            "switch",
            identifier=identifier,
            name=name,
            previous_team=previous_team,
            team_id=team_id,
            ok=ok,
        )

    def log_error(self, error: BaseException):
        """Log a failed run with the full error detail."""
        self._append("error", error_type=type(error).__name__, detail=str(error))

    def end_run(self, status: str, summary: str = ""):
        self._append("run_end", status=status, summary=summary)

    def save(self, suffix: str = "") -> Optional[Path]:
        """Save recorded entries to a JSON file.

        Args:
            suffix: Optional suffix for filename

        Returns:
            Path to saved file, or None if disabled, empty or not writable
        """
        if not self.enabled or not self.entries:
            return None

        filename = f"{self.run_id or 'run'}{suffix}.json"
        filepath = self.output_dir / filename

        try:
            with open(filepath, "w") as f:
                json.dump({"run_id": self.run_id, "entries": self.entries}, f, indent=2)
        except Exception:
            module_logger.exception(f"Failed to save randomizer diagnostics to {filepath}")
            return None

        module_logger.info(f"Saved randomizer diagnostics to {filepath}")
        return filepath
