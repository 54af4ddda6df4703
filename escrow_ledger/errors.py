"""
Typed failures raised by the reconciliation core.

Each error carries the HTTP status the boundary layer should answer with and a
stable machine code, so callers can tell caller mistakes (4xx) from transient
outages (503) without parsing messages.
"""
from __future__ import annotations


class LedgerError(Exception):
    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_detail(self) -> dict:
        return {"error": self.message, "code": self.code}


class ValidationError(LedgerError):
    """Malformed or missing input. Not retryable."""
    status_code = 400
    code = "INVALID_ARGUMENT"


InvalidArgument = ValidationError


class NotFound(LedgerError):
    status_code = 404
    code = "NOT_FOUND"


class ProjectNotFound(NotFound):
    code = "PROJECT_NOT_FOUND"

    def __init__(self, contract_address: str):
        super().__init__(f"Project not found for address: {contract_address}")
        self.contract_address = contract_address


class Conflict(LedgerError):
    status_code = 409
    code = "CONFLICT"


class DuplicateTransaction(Conflict):
    code = "DUPLICATE_TRANSACTION"

    def __init__(self, tx_hash: str):
        super().__init__(f"Transaction already recorded: {tx_hash}")
        self.tx_hash = tx_hash


class UpstreamUnavailable(LedgerError):
    """Transient failure; the whole operation is safe to retry."""
    status_code = 503
    code = "UPSTREAM_UNAVAILABLE"


class MetadataUnavailable(UpstreamUnavailable):
    code = "METADATA_UNAVAILABLE"

    def __init__(self, cid: str):
        super().__init__(f"Could not fetch metadata from any gateway for CID: {cid}")
        self.cid = cid


class StorageUnavailable(UpstreamUnavailable):
    code = "STORAGE_UNAVAILABLE"


class DecodeError(LedgerError):
    """A single receipt log could not be decoded.

    Internal only: the extractor skips the log and never lets this reach a response.
    """
    code = "DECODE_ERROR"
