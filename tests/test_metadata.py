"""
Unit tests for the IPFS metadata resolver - gateway failover, timeouts, CID cleanup.
"""
import time
from unittest.mock import MagicMock

import pytest
import requests

from escrow_ledger.core.metadata import MetadataResolver, normalize_cid
from escrow_ledger.errors import MetadataUnavailable, ValidationError

GATEWAYS = [
    "https://gw1.example/ipfs/{cid}",
    "https://gw2.example/ipfs/{cid}",
    "https://gw3.example/ipfs/{cid}",
    "https://{cid}.gw4.example/",
]


def _response(status=200, body=None, json_error=None):
    resp = MagicMock()
    resp.status_code = status
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} Server Error")
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = body
    return resp


def _resolver(*outcomes, timeout=3.0):
    session = MagicMock()
    session.get.side_effect = list(outcomes)
    return MetadataResolver(gateways=GATEWAYS, timeout=timeout, session=session), session


# =====================================================================
# CID normalization
# =====================================================================
class TestNormalizeCid:
    def test_strips_whitespace_and_quotes(self):
        assert normalize_cid('  "bafyabc"  ') == "bafyabc"
        assert normalize_cid("'bafyabc'") == "bafyabc"

    def test_plain_cid_unchanged(self):
        assert normalize_cid("bafyabc") == "bafyabc"

    def test_none_is_empty(self):
        assert normalize_cid(None) == ""


# =====================================================================
# Failover
# =====================================================================
class TestFailover:
    def test_timeout_then_500_then_success(self):
        resolver, session = _resolver(
            requests.Timeout("read timed out"),
            _response(500),
            _response(200, {"title": "X"}),
        )
        assert resolver.fetch("bafyabc") == {"title": "X"}
        assert session.get.call_count == 3
        urls = [c.args[0] for c in session.get.call_args_list]
        assert urls == [
            "https://gw1.example/ipfs/bafyabc",
            "https://gw2.example/ipfs/bafyabc",
            "https://gw3.example/ipfs/bafyabc",
        ]

    def test_first_gateway_wins(self):
        resolver, session = _resolver(_response(200, {"title": "first"}))
        assert resolver.fetch("bafyabc") == {"title": "first"}
        assert session.get.call_count == 1

    def test_subdomain_gateway_used(self):
        resolver, session = _resolver(
            requests.ConnectionError("refused"),
            requests.ConnectionError("refused"),
            requests.ConnectionError("refused"),
            _response(200, {"title": "sub"}),
        )
        assert resolver.fetch("bafyabc") == {"title": "sub"}
        assert session.get.call_args_list[-1].args[0] == "https://bafyabc.gw4.example/"

    def test_malformed_json_skipped(self):
        resolver, _ = _resolver(
            _response(200, json_error=ValueError("Expecting value")),
            _response(200, ["not", "an", "object"]),
            _response(200, {"title": "ok"}),
        )
        assert resolver.fetch("bafyabc") == {"title": "ok"}

    def test_all_gateways_fail(self):
        resolver, session = _resolver(
            requests.Timeout("t"),
            _response(500),
            _response(404),
            requests.ConnectionError("c"),
        )
        with pytest.raises(MetadataUnavailable) as exc:
            resolver.fetch('"bafydead"')
        assert exc.value.cid == "bafydead"
        assert "bafydead" in str(exc.value)
        assert session.get.call_count == 4

    def test_cid_is_cleaned_before_use(self):
        resolver, session = _resolver(_response(200, {"ok": True}))
        resolver.fetch("  'bafyabc' ")
        assert session.get.call_args.args[0] == "https://gw1.example/ipfs/bafyabc"

    def test_blank_cid_rejected(self):
        resolver, session = _resolver()
        with pytest.raises(ValidationError):
            resolver.fetch(' "" ')
        session.get.assert_not_called()


# =====================================================================
# Timeouts / deadline
# =====================================================================
class TestTimeouts:
    def test_per_gateway_timeout_passed(self):
        resolver, session = _resolver(_response(200, {"ok": True}), timeout=4.0)
        resolver.fetch("bafyabc")
        assert session.get.call_args.kwargs["timeout"] == 4.0

    def test_deadline_caps_timeout(self):
        resolver, session = _resolver(_response(200, {"ok": True}), timeout=10.0)
        resolver.fetch("bafyabc", deadline=time.monotonic() + 1.0)
        assert session.get.call_args.kwargs["timeout"] <= 1.0

    def test_expired_deadline_stops_failover(self):
        resolver, session = _resolver(_response(200, {"ok": True}))
        with pytest.raises(MetadataUnavailable):
            resolver.fetch("bafyabc", deadline=time.monotonic() - 1.0)
        session.get.assert_not_called()
