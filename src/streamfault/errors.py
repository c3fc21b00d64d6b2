from collections.abc import Mapping
from enum import Enum, IntEnum
from types import MappingProxyType


class TransportCode(IntEnum):
    """Canonical gRPC status codes."""

    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16


class StorageErrorCode(IntEnum):
    """
    Codes carried by the StorageError detail record.

    Numbers match google.cloud.bigquery.storage.v1.StorageError.StorageErrorCode.
    """

    STORAGE_ERROR_CODE_UNSPECIFIED = 0
    TABLE_NOT_FOUND = 1
    STREAM_ALREADY_COMMITTED = 2
    STREAM_NOT_FOUND = 3
    INVALID_STREAM_TYPE = 4
    INVALID_STREAM_STATE = 5
    STREAM_FINALIZED = 6
    STREAM_CLOSED = 6
    SCHEMA_MISMATCH_EXTRA_FIELDS = 7
    OFFSET_ALREADY_EXISTS = 8
    OFFSET_OUT_OF_RANGE = 9
    CMEK_NOT_PROVIDED = 10
    INVALID_CMEK_PROVIDED = 11
    CMEK_ENCRYPTION_ERROR = 12
    KMS_SERVICE_ERROR = 13
    KMS_PERMISSION_DENIED = 14


class FailureKind(str, Enum):
    STREAM_FINALIZED = "STREAM_FINALIZED"
    SCHEMA_MISMATCH = "SCHEMA_MISMATCH"


class RecoveryAction(str, Enum):
    """
    What a write client should do next with a failed append.

    GENERIC means no specific category applied and the caller's default
    handling (retry policy, surface the error) takes over.
    """

    REOPEN_STREAM = "reopen_stream"
    REFRESH_SCHEMA = "refresh_schema"
    GENERIC = "generic"


class StorageFailure(Exception):
    """
    Base classified failure for storage write calls.

    Carries the stream the error pertains to and, for multi-stream signals,
    a read-only mapping of stream name -> per-stream status code.
    """

    kind: FailureKind
    recovery: RecoveryAction

    def __init__(
        self,
        message: str | None = None,
        *,
        cause: BaseException | None = None,
        entity: str | None = None,
        errors: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(message)
        self._message = message
        self._cause = cause
        self._entity = entity
        self._errors: Mapping[str, object] = MappingProxyType(dict(errors or {}))
        self.__cause__ = cause

    @property
    def message(self) -> str | None:
        return self._message

    @property
    def cause(self) -> BaseException | None:
        return self._cause

    @property
    def entity(self) -> str | None:
        return self._entity

    @property
    def errors(self) -> Mapping[str, object]:
        return self._errors

    def __repr__(self) -> str:
        return f"{type(self).__name__}(entity={self._entity!r}, message={self._message!r})"


class StreamFinalizedError(StorageFailure):
    """The stream has been finalized and no longer accepts appends."""

    kind = FailureKind.STREAM_FINALIZED
    recovery = RecoveryAction.REOPEN_STREAM


class SchemaMismatchedError(StorageFailure):
    """
    Input rows carry fields the destination table does not have.

    Resolved by updating the table schema and refreshing the writer's schema.
    """

    kind = FailureKind.SCHEMA_MISMATCH
    recovery = RecoveryAction.REFRESH_SCHEMA


class MalformedDetailError(RuntimeError):
    """A StorageError detail declared its type but failed to decode."""

    def __init__(self, type_url: str, message: str) -> None:
        super().__init__(message)
        self.type_url = type_url
