"""
Donation recorder.

Turns a donation event reported by a caller that already holds the transaction
receipt into one durable row linked to its project.

Idempotency: ``tx_hash`` carries a unique constraint. Replaying the same event
returns the row stored the first time (``duplicate=True``) instead of failing,
so a client retrying after a network timeout is safe. A replay whose payload
disagrees with the stored row (other project, wallet or amount) is a genuine
conflict and raises ``DuplicateTransaction``.
"""
from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any, NamedTuple, Optional

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from escrow_ledger.addresses import normalize_address, normalize_tx_hash
from escrow_ledger.config import settings
from escrow_ledger.core.directory import find_by_contract_address
from escrow_ledger.database import BIGINT_MAX
from escrow_ledger.errors import (
    DuplicateTransaction,
    ProjectNotFound,
    StorageUnavailable,
    ValidationError,
)
from escrow_ledger.models import DonationModel, ProjectModel, UserWalletModel

logger = logging.getLogger(__name__)

_BASE_UNITS = re.compile(r"^\d+$")


class RecordedDonation(NamedTuple):
    donation: DonationModel
    duplicate: bool


def _require_text(name: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} is required", code="MISSING_FIELD")
    return value.strip()


def _parse_amount(amount: Any) -> str:
    """Base-unit integer as text. Floats are refused outright."""
    if isinstance(amount, bool) or isinstance(amount, float):
        raise ValidationError("amount must be an integer string in base units", code="INVALID_AMOUNT")
    if isinstance(amount, int):
        if amount < 0:
            raise ValidationError("amount must not be negative", code="INVALID_AMOUNT")
        return str(amount)
    text = _require_text("amount", amount)
    if not _BASE_UNITS.match(text):
        raise ValidationError("amount must be an integer string in base units", code="INVALID_AMOUNT")
    return text


def _parse_block_number(block_number: Any) -> int:
    if isinstance(block_number, bool) or not isinstance(block_number, int):
        raise ValidationError("blockNumber must be an integer", code="INVALID_BLOCK_NUMBER")
    if block_number < 0:
        raise ValidationError("blockNumber must not be negative", code="INVALID_BLOCK_NUMBER")
    if block_number > BIGINT_MAX:
        raise ValidationError("blockNumber is out of range", code="INVALID_BLOCK_NUMBER")
    return block_number


def _parse_donor_id(donor_id: Any) -> Optional[int]:
    if donor_id is None:
        return None
    if isinstance(donor_id, bool) or not isinstance(donor_id, int) or not 0 < donor_id <= BIGINT_MAX:
        raise ValidationError("donorId must be a positive integer", code="INVALID_ID")
    return donor_id


def _find_by_tx_hash(db: Session, tx_hash: str) -> Optional[DonationModel]:
    return db.query(DonationModel).filter(DonationModel.tx_hash == tx_hash).first()


def _resolve_replay(existing: DonationModel, project_id: int, wallet: str, amount: str) -> RecordedDonation:
    if (
        existing.project_id != project_id
        or existing.donor_wallet_address != wallet
        or existing.amount != amount
    ):
        logger.warning(
            "Transaction %s already recorded with a different payload (donation %s)",
            existing.tx_hash, existing.id,
        )
        raise DuplicateTransaction(existing.tx_hash)
    logger.info("Donation already recorded for tx %s (donation %s)", existing.tx_hash, existing.id)
    return RecordedDonation(existing, True)


def _check_wallet_owner(db: Session, donor_id: int, wallet: str) -> None:
    owned = (
        db.query(UserWalletModel)
        .filter(
            UserWalletModel.user_id == donor_id,
            UserWalletModel.wallet_address == wallet,
            UserWalletModel.status == "active",
        )
        .first()
    )
    if owned is None:
        logger.warning("Wallet %s is not an active wallet of user %s", wallet, donor_id)


def record_donation(
    db: Session,
    contract_address: str,
    donor_wallet_address: str,
    amount: Any,
    tx_hash: str,
    block_number: Any,
    donor_id: Optional[int] = None,
) -> RecordedDonation:
    """Persist one donation event and credit the project's funded balance."""
    _require_text("contractAddress", contract_address)
    wallet = normalize_address(_require_text("donorWalletAddress", donor_wallet_address))
    tx_hash = normalize_tx_hash(_require_text("txHash", tx_hash))
    amount = _parse_amount(amount)
    block_number = _parse_block_number(block_number)
    donor_id = _parse_donor_id(donor_id)

    logger.info(
        "Recording donation: contract=%s wallet=%s amount=%s tx=%s block=%s",
        contract_address, wallet, amount, tx_hash, block_number,
    )

    try:
        project = find_by_contract_address(db, contract_address)
        if project is None:
            raise ProjectNotFound(normalize_address(contract_address))

        existing = _find_by_tx_hash(db, tx_hash)
        if existing is not None:
            return _resolve_replay(existing, project.id, wallet, amount)

        if settings.REJECT_INACTIVE_PROJECTS and project.status != "active":
            raise ValidationError(
                f"Project {project.id} is {project.status} and does not accept donations",
                code="PROJECT_INACTIVE",
            )

        if donor_id is not None:
            _check_wallet_owner(db, donor_id, wallet)

        donation = DonationModel(
            project_id=project.id,
            donor_id=donor_id,
            donor_wallet_address=wallet,
            amount=amount,
            tx_hash=tx_hash,
            block_number=block_number,
            created_at=datetime.utcnow(),
        )
        db.add(donation)

        # Row lock where the engine supports it; the balance is read-modify-write.
        locked = (
            db.query(ProjectModel)
            .filter(ProjectModel.id == project.id)
            .with_for_update()
            .one()
        )
        locked.funded_balance = str(int(locked.funded_balance or "0") + int(amount))
        locked.updated_at = datetime.utcnow()

        db.commit()
    except IntegrityError:
        db.rollback()
        existing = _find_by_tx_hash(db, tx_hash)
        if existing is None:
            raise
        # Lost the race against a concurrent insert of the same event.
        return _resolve_replay(existing, project.id, wallet, amount)
    except OperationalError as e:
        db.rollback()
        raise StorageUnavailable(f"Could not record donation: {e.orig}") from e
    except Exception:
        db.rollback()
        raise

    db.refresh(donation)
    logger.info("Stored donation %s for project %s", donation.id, project.id)
    return RecordedDonation(donation, False)
