import re
from datetime import datetime, timezone
from types import SimpleNamespace
from uuid import UUID

import pytest

from chatmemory.Application import map_payload_to_turn_end, map_payload_to_turn_start
from chatmemory.Domain import (
    ErrorKind,
    MessageEntity,
    MessageRole,
    Result,
    SchemaCreateError,
    StoreWriteError
)
from chatmemory.Domain.entities.messageEntity import format_timestamp, new_message_id


def test_result_success_unwraps_value():
    result = Result.success(["a"])

    assert result.ok
    assert result.unwrap() == ["a"]
    assert result.value_or([]) == ["a"]


def test_result_failure_raises_matching_error():
    result = Result.failure(ErrorKind.STORE_WRITE, "write refused")

    assert not result.ok
    assert result.value_or("fallback") == "fallback"
    with pytest.raises(StoreWriteError, match="write refused"):
        result.unwrap()


def test_result_failure_without_detail_uses_kind():
    with pytest.raises(SchemaCreateError, match="schema_create"):
        Result.failure(ErrorKind.SCHEMA_CREATE).unwrap()


def test_message_id_format():
    assert re.match(r"^msg-\d{13}-[0-9a-f]{9}-assistant$", new_message_id("assistant"))


def test_timestamp_has_millis_and_z_suffix():
    value = datetime(2024, 3, 5, 7, 8, 9, 123456, tzinfo=timezone.utc)

    assert format_timestamp(value) == "2024-03-05T07:08:09.123Z"


def test_naive_timestamp_is_treated_as_utc():
    assert format_timestamp(datetime(2024, 3, 5, 7, 8, 9)) == "2024-03-05T07:08:09.000Z"


def test_message_defaults_fill_properties():
    properties = MessageEntity(role=MessageRole.USER, content="").stamped().to_properties()

    assert properties["user_id"] == "default-user"
    assert properties["conversation_id"] == "default-conversation"
    assert properties["content"] == ""
    assert properties["message_id"].endswith("-user")


def test_from_object_reads_uuid_and_distance():
    obj = SimpleNamespace(
        uuid=UUID("12345678-1234-5678-1234-567812345678"),
        properties={"role": "assistant", "content": "hi", "timestamp": "2024-01-01T00:00:00.000Z"},
        metadata=SimpleNamespace(distance=0.1)
    )

    message = MessageEntity.from_object(obj, tenant="t1")

    assert message.object_id == "12345678-1234-5678-1234-567812345678"
    assert message.similarity == 0.9
    assert message.tenant == "t1"
    assert message.sort_key.tzinfo is not None


def test_mapper_reads_identity_from_params():
    event = map_payload_to_turn_start({
        "prompt": "Hello",
        "params": {"userId": " u1 ", "conversationId": "c1", "extra": 1}
    })

    assert event.prompt == "Hello"
    assert event.params.user_id == "u1"
    assert event.params.conversation_id == "c1"


def test_mapper_tolerates_missing_or_malformed_params():
    assert map_payload_to_turn_start({"prompt": "Hello"}).params.user_id is None
    assert map_payload_to_turn_start({"prompt": "Hello", "params": "u1"}).params.user_id is None

    partial = map_payload_to_turn_start({"prompt": "Hi", "params": {"userId": "u1", "conversationId": "  "}}).params
    assert partial.user_id == "u1"
    assert partial.conversation_id is None


def test_mapper_end_event_carries_response():
    event = map_payload_to_turn_end({
        "prompt": "Hello",
        "response": "Hi!",
        "params": {"userId": "u1", "conversationId": "c1"}
    })

    assert event.response == "Hi!"
    assert event.params.conversation_id == "c1"
