"""Turns a flat roster into cohesion groups (squads and solo players)."""

import logging
import random
from typing import Iterable, Optional

from squad_randomizer.models.group import Group, GroupKind
from squad_randomizer.models.player import Player, Squad, is_valid_team

logger = logging.getLogger(__name__)


def squad_key(team_id: int, squad_id: int) -> str:
    """Squad ids repeat across teams, so the team is part of the key."""
    return f"{team_id}:{squad_id}"


def _squad_label(squad_id: int, squad: Optional[Squad]) -> str:
    if squad and squad.name:
        return f"Squad {squad_id} ({squad.name})"
    return f"Squad {squad_id}"


def build_groups(
    players: Iterable[Player],
    rng: random.Random,
    squads: Optional[Iterable[Squad]] = None,
) -> list[Group]:
    """Group players so that squad members stay together.

    Players without a valid team are skipped. Squad members are grouped by
    (team, squad); everyone else becomes a group of one. Each group gets its
    own tie-break roll from ``rng``.

    Args:
        players: Roster snapshot in server order
        rng: Random source for the tie-break rolls
        squads: Optional squad records, only used for labels

    Returns:
        Squad groups in first-seen order, followed by solo groups
    """
    squad_lookup = {squad_key(s.team_id, s.squad_id): s for s in (squads or [])}
    squad_groups: dict[str, Group] = {}
    solo_groups: list[Group] = []
    skipped = 0

    for player in players:
        if not is_valid_team(player.team_id):
            skipped += 1
            continue

        if player.squad_id is not None:
            key = squad_key(player.team_id, player.squad_id)
            group = squad_groups.get(key)
            if group is None:
                group = Group(
                    players=[],
                    label=_squad_label(player.squad_id, squad_lookup.get(key)),
                    roll=rng.random(),
                    kind=GroupKind.SQUAD,
                    key=key,
                )
                squad_groups[key] = group
            group.players.append(player)
        else:
            solo_groups.append(
                Group(
                    players=[player],
                    label=f"Solo {player.display_name}",
                    roll=rng.random(),
                )
            )

    if skipped:
        logger.debug(f"Skipped {skipped} players without a team")

    groups = [*squad_groups.values(), *solo_groups]
    logger.debug(f"Built {len(squad_groups)} squad groups and {len(solo_groups)} solo groups")
    return groups
