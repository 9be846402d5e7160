# backend/agora/services/messaging/protocol.py
"""
Inbound frame parsing.

A frame is a JSON object ``{"event": str, "data": object}``. Each client
event has an explicit payload schema; a field failure is reported with the
error that belongs to that field, checking fields in the order the hub
would check them.
"""

import json
import logging
from typing import Any, Dict, Optional, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from ...core.exceptions import (
    AuthorizationException,
    DomainException,
    InvalidContentException,
    InvalidEventException,
    InvalidMessageIdException,
    InvalidReceiverException,
)
from ...core.ulid_helper import canonical_ulid
from .events import ClientEvent

logger = logging.getLogger(__name__)


def clean_content(value: Any) -> Optional[str]:
    """Trimmed content, or None when it is not a usable message body."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    if not trimmed:
        return None
    return trimmed


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class GlobalMessagePayload(_Payload):
    content: Any = Field(default=None, validate_default=True)

    @field_validator("content")
    @classmethod
    def _check_content(cls, value: Any) -> str:
        cleaned = clean_content(value)
        if cleaned is None:
            raise ValueError("invalid content")
        return cleaned


class PrivateMessagePayload(_Payload):
    content: Any = Field(default=None, validate_default=True)
    receiver_id: Any = Field(default=None, validate_default=True)

    @field_validator("content")
    @classmethod
    def _check_content(cls, value: Any) -> str:
        cleaned = clean_content(value)
        if cleaned is None:
            raise ValueError("invalid content")
        return cleaned

    @field_validator("receiver_id")
    @classmethod
    def _check_receiver(cls, value: Any) -> str:
        canonical = canonical_ulid(value)
        if canonical is None:
            raise ValueError("invalid receiver id")
        return canonical


class MarkAsReadPayload(_Payload):
    message_id: Any = Field(default=None, validate_default=True)
    reader_id: Any = Field(default=None, validate_default=True)

    @field_validator("message_id")
    @classmethod
    def _check_message_id(cls, value: Any) -> str:
        canonical = canonical_ulid(value)
        if canonical is None:
            raise ValueError("invalid message id")
        return canonical

    @field_validator("reader_id")
    @classmethod
    def _check_reader_id(cls, value: Any) -> str:
        canonical = canonical_ulid(value)
        if canonical is None:
            raise ValueError("invalid reader id")
        return canonical


Payload = Union[GlobalMessagePayload, PrivateMessagePayload, MarkAsReadPayload]

PAYLOAD_SCHEMAS: Dict[ClientEvent, Type[BaseModel]] = {
    ClientEvent.GLOBAL_MESSAGE: GlobalMessagePayload,
    ClientEvent.PRIVATE_MESSAGE: PrivateMessagePayload,
    ClientEvent.MARK_AS_READ: MarkAsReadPayload,
}

FIELD_ERRORS: Dict[str, Type[DomainException]] = {
    "content": InvalidContentException,
    "receiverId": InvalidReceiverException,
    "messageId": InvalidMessageIdException,
    "readerId": AuthorizationException,
}


def _error_for(exc: ValidationError) -> DomainException:
    # Errors come back in field declaration order, which is the check order
    for error in exc.errors():
        loc = error.get("loc") or ()
        field = str(loc[0]) if loc else ""
        error_class = FIELD_ERRORS.get(field) or FIELD_ERRORS.get(to_camel(field))
        if error_class is not None:
            return error_class()
    return InvalidEventException()


def parse_frame(raw: Union[str, bytes]) -> Tuple[ClientEvent, Payload]:
    """
    Decode one inbound frame.

    Raises:
        InvalidEventException: not JSON, not an envelope, or an unknown event
        DomainException: the payload failed the check for one of its fields
    """
    try:
        frame = json.loads(raw)
    except (TypeError, ValueError):
        raise InvalidEventException("Unsupported event: frame is not valid JSON.")

    if not isinstance(frame, dict) or not isinstance(frame.get("event"), str):
        raise InvalidEventException("Unsupported event: frame must carry an event name.")

    try:
        event = ClientEvent(frame["event"])
    except ValueError:
        raise InvalidEventException(f"Unsupported event: {frame['event']}.")

    data = frame.get("data")
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InvalidEventException("Unsupported event: data must be an object.")

    try:
        payload = PAYLOAD_SCHEMAS[event].model_validate(data)
    except ValidationError as e:
        raise _error_for(e)
    return event, payload  # type: ignore[return-value]
