"""
Reconciliation core.

Ties the on-chain side (receipts, IPFS metadata) to the off-chain record store:
extract created address -> find project -> record donation -> query donations.
"""
from escrow_ledger.core.directory import find_by_contract_address
from escrow_ledger.core.events import EventLogExtractor, extract_created_address
from escrow_ledger.core.metadata import MetadataResolver, fetch_metadata, normalize_cid
from escrow_ledger.core.queries import donor_stats, list_by_donor, list_by_project, list_by_wallet
from escrow_ledger.core.recorder import RecordedDonation, record_donation

__all__ = [
    "EventLogExtractor",
    "MetadataResolver",
    "RecordedDonation",
    "donor_stats",
    "extract_created_address",
    "fetch_metadata",
    "find_by_contract_address",
    "list_by_donor",
    "list_by_project",
    "list_by_wallet",
    "normalize_cid",
    "record_donation",
]
