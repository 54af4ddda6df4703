"""
Shared pytest fixtures - in‑memory SQLite + FastAPI TestClient.
"""
import os
import tempfile

os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="escrow-ledger-"))
os.environ.setdefault("DATABASE_URL", "sqlite:///" + os.path.join(os.environ["DATA_DIR"], "test.db"))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from escrow_ledger.database import Base, get_db  # noqa: E402
from escrow_ledger.models import ProjectModel  # noqa: E402  - registers all models
from escrow_ledger.main import app  # noqa: E402

# StaticPool ensures all connections share the same in-memory database
_ENGINE = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_Session = sessionmaker(autocommit=False, autoflush=False, bind=_ENGINE)


@pytest.fixture(autouse=True)
def _reset_tables():
    Base.metadata.create_all(bind=_ENGINE)
    yield
    Base.metadata.drop_all(bind=_ENGINE)


@pytest.fixture()
def db():
    session = _Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db):
    def _override():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = _override
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def make_project(db):
    """Insert a project row; returns the persisted model."""
    def _make(contract_address="0xp1", status="active", **overrides):
        fields = dict(
            charity_id=1,
            wallet_address="0xcharity",
            title="Water well",
            description="A well for the village",
            meta_cid="bafytestcid",
            zakat_mode=False,
            total_amount="5000000",
            funded_balance="0",
            status=status,
            contract_address=contract_address,
        )
        fields.update(overrides)
        project = ProjectModel(**fields)
        db.add(project)
        db.commit()
        db.refresh(project)
        return project

    return _make


# ── Receipt log builders ─────────────────────────────────────────────────
from eth_abi import encode  # noqa: E402
from eth_utils import keccak, to_checksum_address  # noqa: E402

PROJECT_CREATED_SIG = "ProjectCreated(address,address,address,address,uint256,uint256,string,bool)"
TRANSFER_SIG = "Transfer(address,address,uint256)"


def _topic(signature):
    return "0x" + keccak(text=signature).hex()


def _address_topic(address):
    return "0x" + encode(["address"], [to_checksum_address(address)]).hex()


@pytest.fixture()
def project_created_log():
    """Build a raw JSON-RPC style ProjectCreated log."""
    def _build(project_address, log_index=0, meta_cid="bafytestcid"):
        data = encode(
            ["address", "uint256", "uint256", "string", "bool"],
            [to_checksum_address("0x" + "44" * 20), 5_000_000, 1_900_000_000, meta_cid, True],
        )
        return {
            "address": "0x" + "fa" * 20,
            "topics": [
                _topic(PROJECT_CREATED_SIG),
                _address_topic(project_address),
                _address_topic("0x" + "22" * 20),
                _address_topic("0x" + "33" * 20),
            ],
            "data": "0x" + data.hex(),
            "logIndex": log_index,
            "transactionIndex": 0,
            "transactionHash": "0x" + "ab" * 32,
            "blockHash": "0x" + "cd" * 32,
            "blockNumber": 42,
        }

    return _build


@pytest.fixture()
def transfer_log():
    """An ERC-20 Transfer log, foreign to the factory interface."""
    def _build(log_index=0):
        return {
            "address": "0x" + "ee" * 20,
            "topics": [
                _topic(TRANSFER_SIG),
                _address_topic("0x" + "11" * 20),
                _address_topic("0x" + "22" * 20),
            ],
            "data": "0x" + encode(["uint256"], [1000]).hex(),
            "logIndex": log_index,
            "transactionIndex": 0,
            "transactionHash": "0x" + "ab" * 32,
            "blockHash": "0x" + "cd" * 32,
            "blockNumber": 42,
        }

    return _build
