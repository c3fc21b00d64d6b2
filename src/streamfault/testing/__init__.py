"""Testing utilities for exercising classifiers without grpc or protobuf installed."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from ..config import ClassifierConfig
from ..errors import StorageErrorCode, TransportCode
from ..record import STORAGE_ERROR_TYPE, StorageErrorRecord

TYPE_URL_PREFIX = "type.googleapis.com/"


@dataclass(frozen=True)
class FakeAny:
    """Packed detail with the same ``type_url``/``value`` shape as google.protobuf.Any."""

    type_url: str
    value: bytes = b""


@dataclass(frozen=True)
class FakeStatus:
    """Stand-in for google.rpc.Status."""

    code: int = int(TransportCode.INVALID_ARGUMENT)
    message: str = ""
    details: Sequence[Any] = field(default_factory=tuple)


class FakeRpcError(Exception):
    """Exception exposing grpc-style ``code()`` and ``details()`` accessors."""

    def __init__(self, code: Any, details: str | None = None) -> None:
        super().__init__(*([details] if details is not None else []))
        self._code = code
        self._details = details

    def code(self) -> Any:
        return self._code

    def details(self) -> str | None:
        return self._details


def encode_record(record: StorageErrorRecord) -> bytes:
    return json.dumps(
        {"code": record.code, "entity": record.entity, "error_message": record.error_message}
    ).encode("utf-8")


def decode_record(value: bytes) -> StorageErrorRecord:
    """Decoder matching encode_record; raises ValueError/KeyError on bad payloads."""
    data = json.loads(value.decode("utf-8"))
    return StorageErrorRecord(
        code=int(data["code"]),
        entity=str(data["entity"]),
        error_message=str(data["error_message"]),
    )


def pack_record(
    code: StorageErrorCode | int,
    entity: str = "",
    error_message: str = "",
    *,
    type_name: str = STORAGE_ERROR_TYPE,
) -> FakeAny:
    record = StorageErrorRecord(code=int(code), entity=entity, error_message=error_message)
    return FakeAny(type_url=TYPE_URL_PREFIX + type_name, value=encode_record(record))


def fake_config(**overrides: Any) -> ClassifierConfig:
    """Return a ClassifierConfig that decodes FakeAny payloads."""

    overrides.setdefault("record_decoder", decode_record)
    return ClassifierConfig(**overrides)


@dataclass
class RecordingLogHook:
    """LogHook that keeps every emitted ``(event, fields)`` pair."""

    events: list[tuple[str, dict[str, Any]]] = field(default_factory=list)

    def __call__(self, event: str, fields: dict[str, Any]) -> None:
        self.events.append((event, dict(fields)))

    @property
    def names(self) -> list[str]:
        return [event for event, _ in self.events]

    def reset(self) -> None:
        self.events.clear()


__all__ = [
    "FakeAny",
    "FakeRpcError",
    "FakeStatus",
    "RecordingLogHook",
    "decode_record",
    "encode_record",
    "fake_config",
    "pack_record",
]
