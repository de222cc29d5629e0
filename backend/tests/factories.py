"""Builders for roster test data."""

import random

from squad_randomizer.models.player import Player


class SequenceRandom(random.Random):
    """Random source that returns a fixed sequence from random()."""

    def __init__(self, values):
        super().__init__(0)
        self._values = list(values)

    def random(self):
        return self._values.pop(0)


def make_player(
    name: str,
    team_id=1,
    squad_id=None,
    eos_id=None,
    steam_id=None,
) -> Player:
    return Player(
        name=name,
        team_id=team_id,
        squad_id=squad_id,
        eos_id=eos_id if eos_id is not None else f"eos_{name}",
        steam_id=steam_id,
    )
