"""
Project directory: contract address -> project record.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from escrow_ledger.addresses import normalize_address
from escrow_ledger.errors import StorageUnavailable
from escrow_ledger.models import ProjectModel

logger = logging.getLogger(__name__)

__all__ = ["find_by_contract_address"]


def find_by_contract_address(db: Session, address: str) -> Optional[ProjectModel]:
    """Return the project deployed at ``address``, or ``None``."""
    canonical = normalize_address(address)
    if not canonical:
        return None
    try:
        project = (
            db.query(ProjectModel)
            .filter(ProjectModel.contract_address == canonical)
            .first()
        )
    except OperationalError as e:
        raise StorageUnavailable(f"Project lookup failed: {e.orig}") from e
    if project is None:
        logger.info("No project at contract address %s", canonical)
    return project
