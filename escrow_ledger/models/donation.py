"""
Donation records. Rows are append-only: nothing in the service updates or deletes them.
"""
from datetime import datetime

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import validates

from escrow_ledger.addresses import normalize_address, normalize_tx_hash
from escrow_ledger.database import Base


class DonationModel(Base):
    __tablename__ = "donations"
    __table_args__ = (
        Index("ix_donations_project_created", "project_id", "created_at", "id"),
        Index("ix_donations_wallet_created", "donor_wallet_address", "created_at", "id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    donor_id = Column(Integer, index=True)  # null for anonymous donations
    donor_wallet_address = Column(String, nullable=False)  # stored lowercase
    amount = Column(String, nullable=False)  # integer base units as text
    tx_hash = Column(String, nullable=False, unique=True)  # stored lowercase
    block_number = Column(BigInteger, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    @validates("donor_wallet_address")
    def _canonical_wallet(self, key, value):
        return normalize_address(value)

    @validates("tx_hash")
    def _canonical_tx_hash(self, key, value):
        return normalize_tx_hash(value)
