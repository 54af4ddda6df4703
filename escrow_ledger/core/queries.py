"""
Donation query service: paginated reads by project, wallet or registered donor.

All listings are newest first, with the row id breaking ties between equal
timestamps, so consecutive pages never overlap or skip rows.
"""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import distinct, func
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Query, Session

from escrow_ledger.addresses import normalize_address
from escrow_ledger.core.pagination import effective_limit, effective_offset
from escrow_ledger.database import BIGINT_MAX
from escrow_ledger.errors import StorageUnavailable, ValidationError
from escrow_ledger.models import DonationModel, ProjectModel

logger = logging.getLogger(__name__)


def _positive_id(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"Valid {name} is required", code="INVALID_ID")
    if isinstance(value, int):
        parsed = value
    else:
        try:
            parsed = int(str(value).strip())
        except ValueError:
            raise ValidationError(f"Valid {name} is required", code="INVALID_ID") from None
    if parsed <= 0:
        raise ValidationError(f"Valid {name} is required", code="INVALID_ID")
    return parsed


def _wallet(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Valid wallet address is required", code="INVALID_WALLET")
    return normalize_address(value)


def _page(query: Query, limit: Any, offset: Any) -> list[DonationModel]:
    skip = effective_offset(offset)
    if skip > BIGINT_MAX:
        return []
    try:
        return (
            query.order_by(DonationModel.created_at.desc(), DonationModel.id.desc())
            .limit(effective_limit(limit))
            .offset(skip)
            .all()
        )
    except OperationalError as e:
        raise StorageUnavailable(f"Donation query failed: {e.orig}") from e


def list_by_project(db: Session, project_id: Any, limit: Any = None, offset: Any = None) -> list[DonationModel]:
    pid = _positive_id("project ID", project_id)
    if pid > BIGINT_MAX:
        return []
    rows = _page(db.query(DonationModel).filter(DonationModel.project_id == pid), limit, offset)
    logger.info("Found %d donations for project %s", len(rows), pid)
    return rows


def list_by_wallet(db: Session, wallet_address: Any, limit: Any = None, offset: Any = None) -> list[DonationModel]:
    wallet = _wallet(wallet_address)
    rows = _page(db.query(DonationModel).filter(DonationModel.donor_wallet_address == wallet), limit, offset)
    logger.info("Found %d donations for wallet %s", len(rows), wallet)
    return rows


def list_by_donor(db: Session, donor_id: Any, limit: Any = None, offset: Any = None) -> list[DonationModel]:
    uid = _positive_id("user ID", donor_id)
    if uid > BIGINT_MAX:
        return []
    rows = _page(db.query(DonationModel).filter(DonationModel.donor_id == uid), limit, offset)
    logger.info("Found %d donations for user %s", len(rows), uid)
    return rows


def _distinct_projects(db: Session, wallet: str, status: str | None = None) -> int:
    query = db.query(func.count(distinct(DonationModel.project_id))).filter(
        DonationModel.donor_wallet_address == wallet
    )
    if status is not None:
        query = query.join(ProjectModel, ProjectModel.id == DonationModel.project_id).filter(
            ProjectModel.status == status
        )
    return query.scalar() or 0


def donor_stats(db: Session, wallet_address: Any) -> dict:
    """Contribution totals for one wallet. ``total_contributed`` is an exact integer string."""
    wallet = _wallet(wallet_address)
    try:
        amounts = [
            row.amount
            for row in db.query(DonationModel.amount).filter(DonationModel.donor_wallet_address == wallet)
        ]
        stats = {
            "wallet_address": wallet,
            "total_contributed": str(sum(int(a) for a in amounts)),
            "total_donations": len(amounts),
            "active_projects": _distinct_projects(db, wallet, "active"),
            "completed_projects": _distinct_projects(db, wallet, "completed"),
            "all_projects": _distinct_projects(db, wallet),
        }
    except OperationalError as e:
        raise StorageUnavailable(f"Donor stats query failed: {e.orig}") from e
    return stats
