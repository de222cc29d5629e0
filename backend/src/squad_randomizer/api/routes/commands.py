"""REST endpoints for chat commands forwarded by the game server bridge."""

import logging

from fastapi import APIRouter, HTTPException, Request

from squad_randomizer.models.command import ChatCommandEvent, CommandStatus
from squad_randomizer.services.randomizer_service import SquadRandomizer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/commands", tags=["commands"])


def _get_randomizer(request: Request) -> SquadRandomizer:
    randomizer = getattr(request.app.state, "randomizer", None)
    if randomizer is None:
        raise HTTPException(status_code=503, detail="Randomizer not initialized")
    return randomizer


@router.get("")
async def list_commands(request: Request):
    """Describe the configured chat command."""
    randomizer = _get_randomizer(request)
    return {
        "commands": [
            {
                "command": randomizer.settings.command,
                "chat": randomizer.settings.admin_chat,
                "description": "Randomize teams while keeping squads together",
            }
        ]
    }


@router.post("/chat")
async def handle_chat_command(request: Request, body: ChatCommandEvent):
    """Receive a chat command event and run the randomizer if it is ours."""
    randomizer = _get_randomizer(request)
    outcome = await randomizer.handle_command(body)
    if outcome.status == CommandStatus.IGNORED:
        logger.debug(f"Ignoring !{body.command} sent in {body.chat}")

    return {
        "status": outcome.status.value,
        "summary": outcome.summary,
        "switches": outcome.switches,
    }
