from escrow_ledger.models.project import ProjectModel
from escrow_ledger.models.donation import DonationModel
from escrow_ledger.models.user_wallet import UserWalletModel

__all__ = ["ProjectModel", "DonationModel", "UserWalletModel"]
