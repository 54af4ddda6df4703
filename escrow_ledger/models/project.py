"""
Project records: the off-chain side of a deployed escrow contract.
"""
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import validates

from escrow_ledger.addresses import normalize_address
from escrow_ledger.database import Base


class ProjectModel(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    charity_id = Column(Integer, nullable=False, index=True)
    wallet_address = Column(String, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    meta_cid = Column(String, nullable=False)
    zakat_mode = Column(Boolean, nullable=False, default=False)
    asnaf_tag = Column(String)
    contract_template = Column(String, nullable=False, default="standard")

    # Amounts are integer base units kept as text, never floats
    total_amount = Column(String, nullable=False, default="0")
    funded_balance = Column(String, nullable=False, default="0")

    status = Column(String, nullable=False, default="active")  # active, draft, completed, deleted
    blockchain_tx_hash = Column(String)
    contract_address = Column(String, unique=True, index=True)  # stored lowercase

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @validates("contract_address")
    def _canonical_address(self, key, value):
        return normalize_address(value) if value is not None else None
