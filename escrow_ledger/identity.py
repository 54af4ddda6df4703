"""
Caller identity supplied by the session layer.

Cookie/JWT validation lives outside this service. The boundary layer overrides
``get_current_user`` (``app.dependency_overrides``) with its own resolver; by
default every caller is anonymous. Nothing here performs authorization.
"""
from typing import Optional

from escrow_ledger.schemas import AuthenticatedUser


def get_current_user() -> Optional[AuthenticatedUser]:
    return None
