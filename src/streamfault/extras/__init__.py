"""Optional helpers for transport libraries.

Dependency-free by default. Helpers attempt optional imports and return None
when the libraries are missing.
"""

from .grpc import grpc_code_and_message, grpc_status

__all__ = [
    "grpc_code_and_message",
    "grpc_status",
]
