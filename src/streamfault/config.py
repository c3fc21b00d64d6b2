import re
from collections.abc import Callable
from dataclasses import dataclass

from .record import STORAGE_ERROR_TYPE, StorageErrorRecord

# Server-side wording the message fallback depends on. Keep these in sync with
# the Storage Write API error text.
SCHEMA_MISMATCH_PHRASE = "input schema has more fields than bigquery schema"
STREAM_FINALIZED_PHRASE = "stream has been finalized and cannot be appended"
STREAM_NAME_PATTERN = re.compile(r"projects/[^/]+/datasets/[^/]+/tables/[^/]+/streams/[^/]+")
UNKNOWN_STREAM_NAME = "unknown"

RecordDecoderFn = Callable[[bytes], StorageErrorRecord]


@dataclass(frozen=True)
class ClassifierConfig:
    schema_mismatch_phrase: str = SCHEMA_MISMATCH_PHRASE
    stream_finalized_phrase: str = STREAM_FINALIZED_PHRASE
    stream_name_pattern: re.Pattern[str] = STREAM_NAME_PATTERN
    unknown_stream_name: str = UNKNOWN_STREAM_NAME
    storage_error_type: str = STORAGE_ERROR_TYPE

    # Decodes the serialized bytes of a packed StorageError detail. When None,
    # the StorageError type from google-cloud-bigquery-storage is used if it
    # can be imported.
    record_decoder: RecordDecoderFn | None = None

    def __post_init__(self) -> None:
        if not self.schema_mismatch_phrase or not self.stream_finalized_phrase:
            raise ValueError("phrases must be non-empty.")
        if self.schema_mismatch_phrase != self.schema_mismatch_phrase.lower():
            raise ValueError("schema_mismatch_phrase must be lower-case.")
        if self.stream_finalized_phrase != self.stream_finalized_phrase.lower():
            raise ValueError("stream_finalized_phrase must be lower-case.")


DEFAULT_CONFIG = ClassifierConfig()
