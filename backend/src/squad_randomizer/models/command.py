"""Chat command events and randomizer outcomes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from squad_randomizer.models.group import Assignment
from squad_randomizer.models.player import TeamUpdate


class ChatCommandEvent(BaseModel):
    """A chat command forwarded by the game server bridge."""

    chat: str  # Channel, e.g. "ChatAdmin" or "ChatAll"
    command: str
    message: str = ""
    name: str = ""
    steam_id: Optional[str] = None
    eos_id: Optional[str] = None

    @property
    def sender_id(self) -> Optional[str]:
        return self.eos_id or self.steam_id


class CommandStatus(str, Enum):
    """Result of handling a chat command."""

    IGNORED = "ignored"  # Wrong channel or command
    NO_PLAYERS = "no_players"  # Nothing eligible to randomize
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class RandomizeResult:
    """Output of one randomizer pipeline run."""

    assignment: Assignment
    updates: list[TeamUpdate] = field(default_factory=list)
    summary: str = ""


@dataclass
class CommandOutcome:
    """What the command handler did, for the HTTP layer and logs."""

    status: CommandStatus
    summary: str = ""
    switches: int = 0
