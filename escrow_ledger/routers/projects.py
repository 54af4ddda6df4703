"""
Project lookup and metadata endpoints.

GET  /api/projects/by-address/{address}           - project deployed at a contract address
GET  /api/projects/by-address/{address}/metadata  - that project's IPFS metadata
POST /api/receipts/created-address                 - project address from a factory deploy receipt
GET  /api/ipfs/{cid}                               - raw IPFS metadata document
"""
from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from escrow_ledger.core import find_by_contract_address
from escrow_ledger.core.events import extract_created_address
from escrow_ledger.core.metadata import MetadataResolver, get_resolver
from escrow_ledger.database import get_db
from escrow_ledger.errors import LedgerError, ProjectNotFound
from escrow_ledger.routers.common import http_error
from escrow_ledger.schemas import (
    CreatedAddressResponse,
    MetadataDocument,
    Project,
    ProjectResponse,
    TransactionReceipt,
)

logger = logging.getLogger(__name__)
router = APIRouter()

# Header a proxy/front-end may set with the seconds left on its own request budget.
TIMEOUT_HEADER = "X-Request-Timeout"


def _caller_deadline(request: Request):
    raw = request.headers.get(TIMEOUT_HEADER)
    if not raw:
        return None
    try:
        seconds = float(raw)
    except ValueError:
        logger.warning("Ignoring malformed %s header: %r", TIMEOUT_HEADER, raw)
        return None
    return time.monotonic() + seconds


def _project_or_404(db: Session, address: str):
    project = find_by_contract_address(db, address)
    if project is None:
        raise ProjectNotFound(address)
    return project


# ── GET /api/projects/by-address/{address} ───────────────────────────────
@router.get("/projects/by-address/{address}", response_model=ProjectResponse)
def get_project_by_address(address: str, db: Session = Depends(get_db)):
    try:
        project = _project_or_404(db, address)
    except LedgerError as e:
        raise http_error(e)
    return ProjectResponse(project=Project.model_validate(project))


# ── GET /api/projects/by-address/{address}/metadata ──────────────────────
@router.get("/projects/by-address/{address}/metadata", response_model=MetadataDocument)
def get_project_metadata(
    address: str,
    request: Request,
    db: Session = Depends(get_db),
    resolver: MetadataResolver = Depends(get_resolver),
):
    try:
        project = _project_or_404(db, address)
        return resolver.fetch(project.meta_cid, deadline=_caller_deadline(request))
    except LedgerError as e:
        logger.warning("Metadata for %s unavailable (%s): %s", address, e.code, e.message)
        raise http_error(e)


# ── POST /api/receipts/created-address ───────────────────────────────────
@router.post("/receipts/created-address", response_model=CreatedAddressResponse)
def created_address(receipt: TransactionReceipt):
    logger.info("Scanning receipt %s (%d logs)", receipt.transaction_hash, len(receipt.logs))
    address = extract_created_address(receipt)
    return CreatedAddressResponse(found=address is not None, contract_address=address)


# ── GET /api/ipfs/{cid} ──────────────────────────────────────────────────
@router.get("/ipfs/{cid}", response_model=MetadataDocument)
def get_ipfs_metadata(
    cid: str,
    request: Request,
    resolver: MetadataResolver = Depends(get_resolver),
):
    try:
        return resolver.fetch(cid, deadline=_caller_deadline(request))
    except LedgerError as e:
        logger.warning("Metadata for CID %s unavailable: %s", cid, e.message)
        raise http_error(e)
