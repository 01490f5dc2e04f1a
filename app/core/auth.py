import re
from typing import Optional

from fastapi import Header, HTTPException
from loguru import logger


# ------------------------------------------------------------
# Wallet address format
# ------------------------------------------------------------
_WALLET_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")


def is_valid_wallet_address(address: Optional[str]) -> bool:
    if not address:
        return False
    return _WALLET_RE.match(address) is not None


def normalize_wallet(address: str) -> str:
    return address.strip().lower()


# ------------------------------------------------------------
# Main Dependency
# ------------------------------------------------------------
def get_current_wallet(
    x_wallet_address: Optional[str] = Header(default=None),
) -> str:
    """
    The acting wallet, as set by the upstream signature verifier.
    Always returned lowercase.
    """
    if not x_wallet_address:
        raise HTTPException(status_code=401, detail="Missing X-Wallet-Address header")

    wallet = x_wallet_address.strip()
    if not is_valid_wallet_address(wallet):
        logger.debug(f"[auth] rejected malformed wallet header len={len(wallet)}")
        raise HTTPException(status_code=401, detail="Invalid wallet address format")

    return normalize_wallet(wallet)
