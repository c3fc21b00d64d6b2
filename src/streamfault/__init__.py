from .classify import (
    LogHook,
    classify_exception,
    classify_message,
    classify_status,
    coerce_transport_code,
    recovery_action,
)
from .config import DEFAULT_CONFIG, ClassifierConfig
from .errors import (
    FailureKind,
    MalformedDetailError,
    RecoveryAction,
    SchemaMismatchedError,
    StorageErrorCode,
    StorageFailure,
    StreamFinalizedError,
    TransportCode,
)
from .extras import grpc_code_and_message, grpc_status
from .record import StorageErrorRecord

__all__ = [
    "ClassifierConfig",
    "DEFAULT_CONFIG",
    "FailureKind",
    "LogHook",
    "MalformedDetailError",
    "RecoveryAction",
    "SchemaMismatchedError",
    "StorageErrorCode",
    "StorageErrorRecord",
    "StorageFailure",
    "StreamFinalizedError",
    "TransportCode",
    "classify_exception",
    "classify_message",
    "classify_status",
    "coerce_transport_code",
    "grpc_code_and_message",
    "grpc_status",
    "recovery_action",
]
