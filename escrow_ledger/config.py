"""
Application settings for the escrow ledger service.
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # Off-chain record store
    DATABASE_URL: str = "sqlite:///./data/escrow_ledger.db"

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # File storage
    DATA_DIR: str = "./data"

    # IPFS gateways, tried in order. "{cid}" is substituted.
    IPFS_GATEWAYS: List[str] = [
        "https://ipfs.io/ipfs/{cid}",
        "https://cloudflare-ipfs.com/ipfs/{cid}",
        "https://gateway.pinata.cloud/ipfs/{cid}",
        "https://{cid}.ipfs.dweb.link/",
    ]
    IPFS_TIMEOUT: float = 5.0
    IPFS_USER_AGENT: str = "escrow-ledger/0.1"

    # Donation listing
    PAGE_LIMIT_DEFAULT: int = 50
    PAGE_LIMIT_MAX: int = 100

    # Donation policy
    REJECT_INACTIVE_PROJECTS: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
