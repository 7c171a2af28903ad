from typing import Any, Optional
from chatmemory.Domain import TurnParams, TurnStartEntity, TurnEndEntity


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _map_params(payload: dict) -> TurnParams:
    params = payload.get("params")
    if not isinstance(params, dict):
        return TurnParams()

    return TurnParams(
        user_id=_as_text(params.get("userId")),
        conversation_id=_as_text(params.get("conversationId"))
    )


def map_payload_to_turn_start(payload: dict) -> TurnStartEntity:
    if not isinstance(payload, dict):
        return TurnStartEntity()

    return TurnStartEntity(
        prompt=str(payload.get("prompt") or ""),
        params=_map_params(payload)
    )


def map_payload_to_turn_end(payload: dict) -> TurnEndEntity:
    if not isinstance(payload, dict):
        return TurnEndEntity()

    return TurnEndEntity(
        prompt=str(payload.get("prompt") or ""),
        response=str(payload.get("response") or ""),
        params=_map_params(payload)
    )
