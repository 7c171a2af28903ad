
from fastapi import APIRouter, Body
import logging
from chatmemory.Application.mapper.hookPayloadMapper import (
    map_payload_to_turn_start,
    map_payload_to_turn_end
)
from chatmemory.Domain import TurnStartResult, TurnEndResult
from chatmemory.Application.dependencies import dependencies

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/hooks", tags=["Agent Hooks"])


@router.post(
    "/request-output/start",
    response_model=TurnStartResult,
    response_model_exclude_none=True
)
async def request_output_start(payload: dict = Body(...)):
    """Pre-call hook: returns the prompt the agent should actually use"""
    event = map_payload_to_turn_start(payload)
    turnOrchestratorService = dependencies.turnOrchestratorService()

    return await turnOrchestratorService.on_turn_start(
        user_id=event.params.user_id,
        conversation_id=event.params.conversation_id,
        prompt=event.prompt
    )


@router.post("/request-output/end", response_model=TurnEndResult)
async def request_output_end(payload: dict = Body(...)):
    """Post-call hook: persists the reply and returns the response to deliver"""
    event = map_payload_to_turn_end(payload)
    turnOrchestratorService = dependencies.turnOrchestratorService()

    return await turnOrchestratorService.on_turn_end(
        user_id=event.params.user_id,
        conversation_id=event.params.conversation_id,
        prompt=event.prompt,
        response=event.response
    )
