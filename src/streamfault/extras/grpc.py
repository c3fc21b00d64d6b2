"""Optional gRPC helpers for pulling codes, messages and status details out of exceptions."""

import importlib
from typing import Any


def _load_attr(module_name: str, attr: str) -> Any | None:
    try:
        module = importlib.import_module(module_name)
    except Exception:
        return None
    value = getattr(module, attr, None)
    if value is None or not isinstance(value, type):
        return None
    return value


def grpc_status(exc: BaseException) -> Any | None:
    """
    Return the structured status carried by a gRPC exception, if any.

    google.api_core errors already expose unpacked ``details`` and are returned
    as-is. For a raw grpc.RpcError the google.rpc.Status is rebuilt from the
    call's trailing metadata via grpcio-status.

    This helper is optional and degrades to None when grpcio, grpcio-status or
    google-api-core are unavailable.
    """
    api_call_error = _load_attr("google.api_core.exceptions", "GoogleAPICallError")
    if api_call_error is not None and isinstance(exc, api_call_error):
        return exc

    rpc_error = _load_attr("grpc", "RpcError")
    if rpc_error is None or not isinstance(exc, rpc_error):
        return None
    if not callable(getattr(exc, "trailing_metadata", None)):
        return None

    try:
        rpc_status = importlib.import_module("grpc_status.rpc_status")
    except Exception:
        return None

    try:
        return rpc_status.from_call(exc)
    except ValueError:
        # Status details disagree with the call's code or message.
        return None


def grpc_code_and_message(exc: BaseException) -> tuple[Any, str | None] | None:
    """
    Return ``(status_code, message)`` for gRPC exceptions, None for anything else.
    """
    api_call_error = _load_attr("google.api_core.exceptions", "GoogleAPICallError")
    if api_call_error is not None and isinstance(exc, api_call_error):
        return getattr(exc, "grpc_status_code", None), getattr(exc, "message", None)

    rpc_error = _load_attr("grpc", "RpcError")
    if rpc_error is None or not isinstance(exc, rpc_error):
        return None

    code = getattr(exc, "code", None)
    details = getattr(exc, "details", None)
    status = code() if callable(code) else None
    message = details() if callable(details) else None
    return status, message
