"""
Shared helpers for the API routers.
"""
from fastapi import HTTPException

from escrow_ledger.errors import LedgerError


def http_error(err: LedgerError) -> HTTPException:
    """Map a core error onto the HTTP status its class declares."""
    return HTTPException(status_code=err.status_code, detail=err.to_detail())
