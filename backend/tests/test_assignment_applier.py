"""Tests for applying assignments to the game server."""

import pytest
from factories import make_player

from squad_randomizer.exceptions import RemoteSwitchError
from squad_randomizer.models.group import Assignment, Group, GroupKind
from squad_randomizer.services.assignment_applier import AssignmentApplier
from squad_randomizer.services.game_server import InMemoryGameServer
from squad_randomizer.services.run_diagnostics import RunDiagnostics

pytestmark = pytest.mark.anyio


def build_assignment() -> Assignment:
    """Team 1 gets a squad split across teams today plus a solo; team 2 a solo."""
    assignment = Assignment()
    assignment.place(
        1,
        Group(
            players=[
                make_player("A1", team_id=1, squad_id=1),
                make_player("A2", team_id=2, squad_id=1),
            ],
            label="Squad 1",
            roll=0.1,
            kind=GroupKind.SQUAD,
        ),
    )
    assignment.place(1, Group(players=[make_player("S1", team_id=2)], label="Solo S1", roll=0.2))
    assignment.place(2, Group(players=[make_player("S2", team_id=1)], label="Solo S2", roll=0.3))
    return assignment


class TestAssignmentApplier:
    """Tests for AssignmentApplier.apply."""

    async def test_only_players_on_wrong_team_are_switched(self):
        """Players already on their target team trigger no remote call."""
        server = InMemoryGameServer()
        applier = AssignmentApplier(server)

        updates = await applier.apply(build_assignment())

        assert server.switch_calls == ["eos_A2", "eos_S1", "eos_S2"]
        assert [(u.identifier, u.previous_team, u.team_id) for u in updates] == [
            ("eos_A2", 2, 1),
            ("eos_S1", 2, 1),
            ("eos_S2", 1, 2),
        ]

    async def test_second_application_is_a_no_op(self):
        """Re-applying after reconciling the updates issues no switches."""
        server = InMemoryGameServer()
        applier = AssignmentApplier(server)
        assignment = build_assignment()

        updates = await applier.apply(assignment)
        server.switch_calls.clear()
        second = await applier.apply(assignment.reconciled(updates))

        assert second == []
        assert server.switch_calls == []

    async def test_squad_members_all_end_on_target_team(self):
        server = InMemoryGameServer()
        assignment = build_assignment()

        updates = await AssignmentApplier(server).apply(assignment)
        final = assignment.reconciled(updates)

        for team_id, groups in final.teams.items():
            for group in groups:
                assert all(p.team_id == team_id for p in group.players)

    async def test_failure_stops_the_walk(self):
        """A failed switch aborts; earlier switches are reported, later ones never sent."""
        server = InMemoryGameServer()
        server.fail_on.add("eos_S1")
        applier = AssignmentApplier(server)

        with pytest.raises(RemoteSwitchError) as exc_info:
            await applier.apply(build_assignment())

        error = exc_info.value
        assert server.switch_calls == ["eos_A2", "eos_S1"]
        assert [u.identifier for u in error.applied] == ["eos_A2"]
        assert error.player.name == "S1"
        assert isinstance(error.__cause__, RuntimeError)
        assert "1 switches already applied" in str(error)

    async def test_player_without_identifier_is_skipped(self):
        server = InMemoryGameServer()
        assignment = Assignment()
        assignment.place(
            2,
            Group(players=[make_player("Ghost", team_id=1, eos_id="")], label="Solo Ghost", roll=0.5),
        )

        updates = await AssignmentApplier(server).apply(assignment)

        assert updates == []
        assert server.switch_calls == []

    async def test_switches_recorded_in_diagnostics(self, tmp_path, monkeypatch):
        monkeypatch.delenv("RANDOMIZER_DIAGNOSTICS", raising=False)
        diagnostics = RunDiagnostics(output_dir=tmp_path, enabled=True).start_run("run_test")
        server = InMemoryGameServer()
        server.fail_on.add("eos_S2")

        with pytest.raises(RemoteSwitchError):
            await AssignmentApplier(server, diagnostics=diagnostics).apply(build_assignment())

        switches = [e for e in diagnostics.entries if e["event"] == "switch"]
        assert [(e["identifier"], e["ok"]) for e in switches] == [
            ("eos_A2", True),
            ("eos_S1", True),
            ("eos_S2", False),
        ]
