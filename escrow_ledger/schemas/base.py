"""
Request/response contracts for the escrow ledger API.

Field names are snake_case in Python and camelCase on the wire, matching the
JSON the dApp front-end already sends.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------

class AuthenticatedUser(CamelModel):
    """Caller identity validated by the session layer."""
    id: int
    name: str
    role: str
    email: str


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

class Project(CamelModel):
    id: int
    charity_id: int
    wallet_address: str
    title: str
    description: str
    meta_cid: str
    zakat_mode: bool
    asnaf_tag: Optional[str] = None
    total_amount: str
    funded_balance: str
    status: str
    blockchain_tx_hash: Optional[str] = None
    contract_address: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class ProjectResponse(CamelModel):
    project: Project


# ---------------------------------------------------------------------------
# Donations
# ---------------------------------------------------------------------------

class DonationRecordRequest(CamelModel):
    contract_address: str = Field(..., description="Project escrow contract address")
    donor_wallet_address: str
    amount: str = Field(..., description="Integer amount in the contract's base unit")
    tx_hash: str
    block_number: int
    donor_id: Optional[int] = None


class Donation(CamelModel):
    id: int
    project_id: int
    donor_id: Optional[int] = None
    donor_wallet_address: str
    amount: str
    tx_hash: str
    block_number: int
    created_at: datetime


class DonationRecordResponse(CamelModel):
    success: bool = True
    duplicate: bool = False
    donation: Donation
    message: str = ""


class DonorStats(CamelModel):
    wallet_address: str
    total_contributed: str
    total_donations: int
    active_projects: int
    completed_projects: int
    all_projects: int


# ---------------------------------------------------------------------------
# Receipts
# ---------------------------------------------------------------------------

class ReceiptLog(CamelModel):
    """One raw log entry as returned by an Ethereum JSON-RPC node."""
    address: str
    topics: list[str] = Field(default_factory=list)
    data: str = "0x"
    log_index: int = 0
    transaction_index: int = 0
    transaction_hash: str = "0x"
    block_hash: str = "0x"
    block_number: int = 0


class TransactionReceipt(CamelModel):
    transaction_hash: Optional[str] = None
    block_number: Optional[int] = None
    logs: list[ReceiptLog] = Field(default_factory=list)


class CreatedAddressResponse(CamelModel):
    found: bool
    contract_address: Optional[str] = None


MetadataDocument = dict[str, Any]
