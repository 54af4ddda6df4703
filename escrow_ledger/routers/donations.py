"""
Donation API endpoints.

POST /api/donations/record                       - record a donation event (idempotent on txHash)
GET  /api/donations/project/{project_id}          - donations to one project
GET  /api/donations/donor/wallet/{wallet_address} - donations from one wallet
GET  /api/donations/donor/user/{user_id}          - donations by one registered user
GET  /api/stats/donor/{wallet_address}            - contribution totals for one wallet
"""
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from escrow_ledger.core import (
    donor_stats,
    list_by_donor,
    list_by_project,
    list_by_wallet,
    record_donation,
)
from escrow_ledger.database import get_db
from escrow_ledger.errors import LedgerError
from escrow_ledger.identity import get_current_user
from escrow_ledger.routers.common import http_error
from escrow_ledger.schemas import (
    AuthenticatedUser,
    Donation,
    DonationRecordRequest,
    DonationRecordResponse,
    DonorStats,
)

logger = logging.getLogger(__name__)
router = APIRouter()


# ── POST /api/donations/record ───────────────────────────────────────────
@router.post("/donations/record", response_model=DonationRecordResponse)
def record(
    req: DonationRecordRequest,
    db: Session = Depends(get_db),
    user: Optional[AuthenticatedUser] = Depends(get_current_user),
):
    donor_id = user.id if user is not None else req.donor_id
    try:
        result = record_donation(
            db,
            contract_address=req.contract_address,
            donor_wallet_address=req.donor_wallet_address,
            amount=req.amount,
            tx_hash=req.tx_hash,
            block_number=req.block_number,
            donor_id=donor_id,
        )
    except LedgerError as e:
        logger.warning("Donation rejected (%s): %s", e.code, e.message)
        raise http_error(e)

    if result.duplicate:
        message = "Donation was already recorded previously"
    else:
        message = "Donation recorded and project funded balance updated"
    return DonationRecordResponse(
        success=True,
        duplicate=result.duplicate,
        donation=Donation.model_validate(result.donation),
        message=message,
    )


# ── GET /api/donations/project/{project_id} ──────────────────────────────
@router.get("/donations/project/{project_id}", response_model=List[Donation])
def donations_for_project(
    project_id: str,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    db: Session = Depends(get_db),
):
    try:
        return list_by_project(db, project_id, limit, offset)
    except LedgerError as e:
        raise http_error(e)


# ── GET /api/donations/donor/wallet/{wallet_address} ─────────────────────
@router.get("/donations/donor/wallet/{wallet_address}", response_model=List[Donation])
def donations_for_wallet(
    wallet_address: str,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    db: Session = Depends(get_db),
):
    try:
        return list_by_wallet(db, wallet_address, limit, offset)
    except LedgerError as e:
        raise http_error(e)


# ── GET /api/donations/donor/user/{user_id} ──────────────────────────────
@router.get("/donations/donor/user/{user_id}", response_model=List[Donation])
def donations_for_user(
    user_id: str,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    db: Session = Depends(get_db),
):
    try:
        return list_by_donor(db, user_id, limit, offset)
    except LedgerError as e:
        raise http_error(e)


# ── GET /api/stats/donor/{wallet_address} ────────────────────────────────
@router.get("/stats/donor/{wallet_address}", response_model=DonorStats)
def stats_for_wallet(wallet_address: str, db: Session = Depends(get_db)):
    try:
        return donor_stats(db, wallet_address)
    except LedgerError as e:
        raise http_error(e)
