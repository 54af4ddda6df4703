"""
Wallets registered by platform users.
"""
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import validates

from escrow_ledger.addresses import normalize_address
from escrow_ledger.database import Base


class UserWalletModel(Base):
    __tablename__ = "user_wallets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    wallet_address = Column(String, nullable=False, unique=True)  # stored lowercase
    is_primary = Column(Boolean, nullable=False, default=False)
    status = Column(String, nullable=False, default="active")  # active, revoked, lost, compromised
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, onupdate=datetime.utcnow)

    @validates("wallet_address")
    def _canonical_wallet(self, key, value):
        return normalize_address(value)
