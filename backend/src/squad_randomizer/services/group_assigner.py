"""Greedy largest-first placement of groups onto two teams.

Groups are placed biggest first so the small ones left at the end can top
off whichever team is behind. A group never gets split: if it cannot fit on
either side without passing the target size, it goes to the smaller team and
the overflow is accepted.
"""

import logging
import math
import random
from typing import Iterable

from squad_randomizer.exceptions import NoGroupsError
from squad_randomizer.models.group import Assignment, Group

logger = logging.getLogger(__name__)


def target_team_size(total_players: int) -> int:
    """Largest size either team may reach under normal placement."""
    return math.ceil(total_players / 2)


def order_groups(groups: Iterable[Group]) -> list[Group]:
    """Largest groups first; equal sizes ordered by tie-break roll."""
    return sorted(groups, key=lambda g: (-g.size, g.roll))


def choose_team(size1: int, size2: int, group_size: int, target: int, rng: random.Random) -> int:
    """Pick the team (1 or 2) for a group given the running team sizes."""
    fits1 = size1 + group_size <= target or size2 >= target
    fits2 = size2 + group_size <= target or size1 >= target

    if fits2 and not fits1:
        return 2
    if fits1 and not fits2:
        return 1
    # Both fit, or neither does (overflow goes to the smaller team)
    if size1 == size2:
        return 1 if rng.random() < 0.5 else 2
    return 1 if size1 < size2 else 2


def assign_groups(groups: Iterable[Group], rng: random.Random) -> Assignment:
    """Split groups across teams 1 and 2 while keeping team sizes close.

    Args:
        groups: Cohesion groups from the group builder
        rng: Random source for coin flips when both teams are level

    Returns:
        Assignment with the groups per team and the final team sizes

    Raises:
        NoGroupsError: If there is nothing to assign
    """
    ordered = order_groups(groups)
    if not ordered:
        raise NoGroupsError()

    total = sum(g.size for g in ordered)
    target = target_team_size(total)
    assignment = Assignment()

    for group in ordered:
        team_id = choose_team(
            assignment.team_sizes[1],
            assignment.team_sizes[2],
            group.size,
            target,
            rng,
        )
        assignment.place(team_id, group)
        logger.debug(f"{group.label} ({group.size}) -> team {team_id}")

    if max(assignment.team_sizes.values()) > target:
        logger.info(
            f"Team sizes exceed target {target} to keep squads together: "
            f"{assignment.team_sizes[1]}/{assignment.team_sizes[2]}"
        )

    return assignment
