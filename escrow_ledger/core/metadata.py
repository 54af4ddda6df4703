"""
IPFS metadata resolver with gateway failover.

Gateways are tried one at a time in configured order and the first one that
answers 2xx with a JSON object wins. Every gateway gets a bounded timeout so a
hung gateway cannot stall the rest of the list; an optional caller deadline caps
those timeouts further and stops failover once it has passed. There is no retry
beyond the gateway list itself.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Optional, Sequence

import requests
from requests.exceptions import RequestException

from escrow_ledger.config import settings
from escrow_ledger.errors import MetadataUnavailable, ValidationError

logger = logging.getLogger(__name__)


def normalize_cid(cid: str) -> str:
    """Trim whitespace and surrounding quote characters left behind by upstream storage."""
    if cid is None:
        return ""
    return cid.strip().strip("\"'").strip()


class MetadataResolver:
    def __init__(
        self,
        gateways: Optional[Sequence[str]] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.gateways = list(gateways if gateways is not None else settings.IPFS_GATEWAYS)
        self.timeout = timeout if timeout is not None else settings.IPFS_TIMEOUT
        if session is None:
            session = requests.Session()
            session.headers.update({
                "Accept": "application/json",
                "User-Agent": settings.IPFS_USER_AGENT,
            })
        self.session = session

    def gateway_urls(self, cid: str) -> list[str]:
        return [template.format(cid=cid) for template in self.gateways]

    def _attempt_timeout(self, deadline: Optional[float]) -> Optional[float]:
        """Per-gateway timeout, shortened to what is left of the caller's deadline."""
        if deadline is None:
            return self.timeout
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return None
        return min(self.timeout, remaining)

    def fetch(self, cid: str, deadline: Optional[float] = None) -> dict[str, Any]:
        """Return the metadata document for ``cid``.

        ``deadline`` is an absolute ``time.monotonic()`` value supplied by the
        caller's own request timeout. Raises ``MetadataUnavailable`` when every
        gateway failed or the deadline ran out first.
        """
        clean_cid = normalize_cid(cid)
        if not clean_cid:
            raise ValidationError("CID must not be empty", code="INVALID_CID")

        for url in self.gateway_urls(clean_cid):
            timeout = self._attempt_timeout(deadline)
            if timeout is None:
                logger.warning("Deadline exceeded before trying %s", url)
                break
            try:
                resp = self.session.get(url, timeout=timeout)
                resp.raise_for_status()
                document = resp.json()
            except RequestException as e:
                logger.warning("Gateway %s failed: %s", url, e)
                continue
            except ValueError as e:
                logger.warning("Gateway %s returned malformed JSON: %s", url, e)
                continue
            if not isinstance(document, dict):
                logger.warning("Gateway %s returned %s instead of a JSON object", url, type(document).__name__)
                continue
            logger.info("Fetched metadata for %s from %s", clean_cid, url)
            return document

        raise MetadataUnavailable(clean_cid)


_default_resolver: Optional[MetadataResolver] = None


def get_resolver() -> MetadataResolver:
    """Shared resolver built from settings. FastAPI dependency."""
    global _default_resolver
    if _default_resolver is None:
        _default_resolver = MetadataResolver()
    return _default_resolver


def fetch_metadata(cid: str, deadline: Optional[float] = None) -> dict[str, Any]:
    return get_resolver().fetch(cid, deadline=deadline)
