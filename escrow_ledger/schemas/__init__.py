from escrow_ledger.schemas.base import (  # noqa: F401
    AuthenticatedUser,
    CreatedAddressResponse,
    Donation,
    DonationRecordRequest,
    DonationRecordResponse,
    DonorStats,
    MetadataDocument,
    Project,
    ProjectResponse,
    ReceiptLog,
    TransactionReceipt,
)
