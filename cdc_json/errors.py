"""
Exception hierarchy for changelog JSON encoding
"""

from typing import Any


class CdcJsonError(Exception):
    """Base exception for all cdc_json errors"""

    pass


class ConfigurationError(CdcJsonError):
    """Raised when an envelope configuration is invalid (fatal, never retried)"""

    pass


class UnsupportedChangeKind(CdcJsonError):
    """Raised when a row carries a kind outside INSERT/UPDATE_BEFORE/UPDATE_AFTER/DELETE"""

    def __init__(self, kind: Any):
        self.kind = kind
        super().__init__(f"Unsupported operation '{kind}' for row kind.")


class EncodingError(CdcJsonError):
    """Raised when the JSON codec rejects a value or schema"""

    pass


class SerializerStateError(CdcJsonError):
    """Raised when a serializer is used outside its lifecycle (e.g. before open())"""

    pass


class SerializationError(CdcJsonError):
    """
    Per-record failure wrapper

    Carries a human-readable description of the offending row. The
    underlying mapper or codec error is chained as __cause__.
    """

    def __init__(self, row_description: str):
        self.row_description = row_description
        super().__init__(f"Could not serialize row '{row_description}'.")
