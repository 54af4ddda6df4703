"""
Recover a newly deployed project contract address from a transaction receipt.

Pure decode over already-fetched data: no provider, no network I/O. Each log
entry is tried against every event in the factory interface with web3's
``process_log``; entries that decode as nothing are skipped, so a receipt full
of foreign logs (token transfers, proxies, other contracts) is scanned to the end.

When a single receipt carries more than one ``ProjectCreated`` event the first
one in log order wins.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from eth_abi.exceptions import DecodingError
from hexbytes import HexBytes
from web3 import Web3
from web3.exceptions import LogTopicError, MismatchedABI

from escrow_ledger.core.abi import PROJECT_CREATED_EVENT, PROJECT_FACTORY_ABI
from escrow_ledger.errors import DecodeError

logger = logging.getLogger(__name__)

_DECODE_FAILURES = (MismatchedABI, LogTopicError, DecodingError, ValueError, TypeError, KeyError)


def _field(entry: Any, *names: str, default: Any = None) -> Any:
    """Read a log field from a dict or an attribute-style object, trying camelCase then snake_case."""
    for name in names:
        if isinstance(entry, Mapping):
            if name in entry:
                return entry[name]
        elif hasattr(entry, name):
            return getattr(entry, name)
    return default


def _as_bytes(value: Any) -> HexBytes:
    if value is None:
        return HexBytes(b"")
    return HexBytes(value)


def normalize_log(entry: Any) -> dict:
    """Coerce a raw log (JSON-RPC dict, web3 AttributeDict or ReceiptLog) into what ``process_log`` expects."""
    topics = _field(entry, "topics", default=[]) or []
    return {
        "address": _field(entry, "address", default=""),
        "topics": [_as_bytes(t) for t in topics],
        "data": _as_bytes(_field(entry, "data", default=b"")),
        "logIndex": _field(entry, "logIndex", "log_index", default=0),
        "transactionIndex": _field(entry, "transactionIndex", "transaction_index", default=0),
        "transactionHash": _as_bytes(_field(entry, "transactionHash", "transaction_hash")),
        "blockHash": _as_bytes(_field(entry, "blockHash", "block_hash")),
        "blockNumber": _field(entry, "blockNumber", "block_number", default=0),
    }


class EventLogExtractor:
    """Decodes receipt logs against a static contract event interface."""

    def __init__(
        self,
        abi: Optional[list[dict]] = None,
        event_name: str = PROJECT_CREATED_EVENT,
        address_arg: str = "projectAddress",
    ):
        self.abi = abi if abi is not None else PROJECT_FACTORY_ABI
        self.event_name = event_name
        self.address_arg = address_arg
        # Web3() without a provider is enough for ABI decoding
        self._contract = Web3().eth.contract(abi=self.abi)
        self._event_names = [item["name"] for item in self.abi if item.get("type") == "event"]

    def decode_log(self, entry: Any):
        """Decode one log entry, raising ``DecodeError`` when no event in the interface matches."""
        try:
            log = normalize_log(entry)
        except _DECODE_FAILURES as e:
            raise DecodeError(f"Malformed log entry: {e}") from e

        for name in self._event_names:
            event = getattr(self._contract.events, name)
            try:
                return event().process_log(log)
            except _DECODE_FAILURES:
                continue
        raise DecodeError(f"Log {log['logIndex']} does not match any known event")

    def decode_logs(self, logs: Iterable[Any]) -> list:
        """Decode every log that matches the interface, in log order, skipping the rest."""
        decoded = []
        for position, entry in enumerate(logs):
            try:
                decoded.append(self.decode_log(entry))
            except DecodeError as e:
                logger.debug("Skipping log #%d: %s", position, e)
        return decoded

    def extract_created_address(self, receipt: Any) -> Optional[str]:
        """Return the address argument of the first creation event, or ``None`` when absent."""
        logs = _field(receipt, "logs", default=[]) or []
        matches = [ev for ev in self.decode_logs(logs) if ev["event"] == self.event_name]
        if not matches:
            logger.info("No %s event in receipt (%d logs)", self.event_name, len(logs))
            return None
        if len(matches) > 1:
            logger.warning(
                "Receipt carries %d %s events, using the first in log order",
                len(matches), self.event_name,
            )
        address = matches[0]["args"][self.address_arg]
        logger.info("Extracted %s address %s", self.event_name, address)
        return address


_default_extractor: Optional[EventLogExtractor] = None


def extract_created_address(receipt: Any) -> Optional[str]:
    """Module-level shortcut using the ProjectFactory interface."""
    global _default_extractor
    if _default_extractor is None:
        _default_extractor = EventLogExtractor()
    return _default_extractor.extract_created_address(receipt)
