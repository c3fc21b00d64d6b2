from dataclasses import dataclass
from typing import Any

from .errors import StorageErrorCode

STORAGE_ERROR_TYPE = "google.cloud.bigquery.storage.v1.StorageError"


@dataclass(frozen=True)
class StorageErrorRecord:
    """Decoded view of a StorageError detail."""

    code: int
    entity: str
    error_message: str

    @property
    def storage_code(self) -> StorageErrorCode | None:
        try:
            return StorageErrorCode(self.code)
        except ValueError:
            return None

    @classmethod
    def from_message(cls, message: Any) -> "StorageErrorRecord":
        """
        Build a record from a StorageError message.

        Accepts raw protobuf messages and proto-plus wrappers; both expose
        ``code``, ``entity`` and ``error_message`` fields.
        """
        return cls(
            code=int(getattr(message, "code", 0)),
            entity=str(getattr(message, "entity", "")),
            error_message=str(getattr(message, "error_message", "")),
        )
