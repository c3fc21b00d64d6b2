import importlib
from collections.abc import Callable, Iterable
from typing import Any

from .config import DEFAULT_CONFIG, ClassifierConfig, RecordDecoderFn
from .errors import (
    MalformedDetailError,
    RecoveryAction,
    SchemaMismatchedError,
    StorageErrorCode,
    StorageFailure,
    StreamFinalizedError,
    TransportCode,
)
from .extras.grpc import grpc_code_and_message, grpc_status
from .record import StorageErrorRecord

LogHook = Callable[[str, dict[str, Any]], None]


def coerce_transport_code(code: object) -> TransportCode | None:
    """
    Normalize a transport status code into a TransportCode.

    Accepts TransportCode, plain ints, grpc.StatusCode (whose value is an
    ``(int, str)`` tuple) and code names such as ``"INVALID_ARGUMENT"``.
    Returns None for anything that does not name a known code.
    """
    if code is None or isinstance(code, bool):
        return None
    if isinstance(code, TransportCode):
        return code
    if isinstance(code, int):
        try:
            return TransportCode(int(code))
        except ValueError:
            return None
    if isinstance(code, str):
        return TransportCode.__members__.get(code.strip().upper().replace(" ", "_"))

    value = getattr(code, "value", None)
    if isinstance(value, tuple) and value:
        return coerce_transport_code(value[0])
    if isinstance(value, int):
        return coerce_transport_code(value)

    name = getattr(code, "name", None)
    if isinstance(name, str):
        return TransportCode.__members__.get(name)
    return None


def _type_name(type_url: str) -> str:
    return type_url.rsplit("/", 1)[-1]


def _descriptor_name(detail: Any) -> str | None:
    descriptor = getattr(detail, "DESCRIPTOR", None)
    if descriptor is None:
        # proto-plus wrappers keep the descriptor on the underlying message.
        pb = getattr(type(detail), "pb", None)
        if callable(pb):
            descriptor = getattr(pb(detail), "DESCRIPTOR", None)
    name = getattr(descriptor, "full_name", None)
    return name if isinstance(name, str) else None


def _default_decoder() -> RecordDecoderFn | None:
    try:
        types_mod = importlib.import_module("google.cloud.bigquery_storage_v1.types")
    except Exception:
        return None

    storage_error = getattr(types_mod, "StorageError", None)
    if storage_error is None:
        return None

    def decode(value: bytes) -> StorageErrorRecord:
        return StorageErrorRecord.from_message(storage_error.deserialize(value))

    return decode


def _decode_packed(detail: Any, type_url: str, config: ClassifierConfig) -> StorageErrorRecord | None:
    decoder = config.record_decoder or _default_decoder()
    if decoder is None:
        return None
    try:
        return decoder(bytes(getattr(detail, "value", b"")))
    except Exception as exc:
        raise MalformedDetailError(
            type_url, f"Could not decode {config.storage_error_type} detail: {exc}"
        ) from exc


def _status_details(status: Any) -> Iterable[Any]:
    details = getattr(status, "details", None)
    if details is None or callable(details) or isinstance(details, (str, bytes)):
        return ()
    return details


def _find_storage_error(status: Any, config: ClassifierConfig) -> StorageErrorRecord | None:
    for detail in _status_details(status):
        if isinstance(detail, StorageErrorRecord):
            return detail

        type_url = getattr(detail, "type_url", None)
        if isinstance(type_url, str):
            if _type_name(type_url) == config.storage_error_type:
                return _decode_packed(detail, type_url, config)
            continue

        if _descriptor_name(detail) == config.storage_error_type:
            return StorageErrorRecord.from_message(detail)
    return None


def classify_status(
    status: Any,
    cause: BaseException | None = None,
    *,
    config: ClassifierConfig | None = None,
) -> StorageFailure | None:
    """
    Classify a structured status by its embedded StorageError detail.

    ``status`` is anything exposing ``details``: a google.rpc.Status with packed
    Any messages, or a google.api_core error whose details are already
    unpacked. Only the first StorageError detail is considered.

    Returns None when no StorageError is present or its code is not one we
    classify. Raises MalformedDetailError when the detail cannot be decoded.
    """
    cfg = config or DEFAULT_CONFIG
    record = _find_storage_error(status, cfg)
    if record is None:
        return None

    code = record.storage_code
    if code is StorageErrorCode.STREAM_FINALIZED:
        return StreamFinalizedError(record.error_message, cause=cause, entity=record.entity)
    if code is StorageErrorCode.SCHEMA_MISMATCH_EXTRA_FIELDS:
        return SchemaMismatchedError(record.error_message, cause=cause, entity=record.entity)
    return None


def classify_message(
    code: object,
    message: str | None,
    cause: BaseException | None = None,
    *,
    config: ClassifierConfig | None = None,
) -> StorageFailure | None:
    """
    Classify a failure from its transport code and message text.

    Fallback for servers that do not attach a StorageError detail. Only
    INVALID_ARGUMENT failures are considered, and only the known phrasings
    match. The stream name is pulled from the message when present, otherwise
    the config's unknown placeholder is used.
    """
    if message is None:
        return None
    if coerce_transport_code(code) is not TransportCode.INVALID_ARGUMENT:
        return None

    cfg = config or DEFAULT_CONFIG
    lowered = message.lower()
    failure_type: type[StorageFailure]
    if cfg.schema_mismatch_phrase in lowered:
        failure_type = SchemaMismatchedError
    elif cfg.stream_finalized_phrase in lowered:
        failure_type = StreamFinalizedError
    else:
        return None

    match = cfg.stream_name_pattern.search(message)
    entity = match.group(0) if match else cfg.unknown_stream_name
    return failure_type(message, cause=cause, entity=entity)


def _code_and_message(exc: BaseException) -> tuple[Any, str | None]:
    extracted = grpc_code_and_message(exc)
    if extracted is not None:
        return extracted

    code = getattr(exc, "grpc_status_code", None)
    if code is None:
        code = getattr(exc, "code", None)
        if callable(code):
            code = code()
    message = str(exc) if exc.args else None
    return code, message


def _emit(on_log: LogHook | None, event: str, fields: dict[str, Any]) -> None:
    if on_log is None:
        return
    try:
        on_log(event, fields)
    except Exception:
        pass


def classify_exception(
    exc: BaseException,
    *,
    status: Any | None = None,
    config: ClassifierConfig | None = None,
    on_log: LogHook | None = None,
) -> StorageFailure | None:
    """
    Classify a failed storage write call.

    Tries the structured status first (``status`` when given, otherwise the one
    carried by ``exc``), then falls back to the exception's transport code and
    message. Returns None when neither applies; callers must then treat the
    failure as generic.

    on_log:
        Optional callback receiving ``(event, fields)``. Emits
        ``storage_error.classified`` or ``storage_error.unclassified``.
    """
    if isinstance(exc, StorageFailure):
        return exc

    if status is None:
        status = grpc_status(exc)

    failure: StorageFailure | None = None
    source = "status"
    if status is not None:
        failure = classify_status(status, exc, config=config)

    code: Any = None
    if failure is None:
        source = "message"
        code, message = _code_and_message(exc)
        failure = classify_message(code, message, exc, config=config)

    if failure is None:
        transport_code = coerce_transport_code(code)
        _emit(
            on_log,
            "storage_error.unclassified",
            {
                "code": transport_code.name if transport_code is not None else None,
                "exception": type(exc).__name__,
            },
        )
        return None

    _emit(
        on_log,
        "storage_error.classified",
        {
            "kind": failure.kind.value,
            "entity": failure.entity,
            "source": source,
            "recovery": failure.recovery.value,
        },
    )
    return failure


def recovery_action(failure: StorageFailure | None) -> RecoveryAction:
    """Map a classification result to the recovery the caller should apply."""
    if failure is None:
        return RecoveryAction.GENERIC
    return failure.recovery
