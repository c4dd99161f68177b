"""Configuration helpers for the FTX order client."""
from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


DEFAULT_BASE_URL = "https://ftx.com/api"

_DOTENV_LOADED = False


def _load_dotenv() -> None:
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    env_path = Path(__file__).resolve().parents[2] / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)
    else:
        load_dotenv(override=False)
    _DOTENV_LOADED = True


@dataclass
class FtxConfig:
    """Holds the credentials and endpoints required to talk to FTX."""

    api_key: str
    api_secret: str
    subaccount: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    optimized_base_url: Optional[str] = None
    timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "FtxConfig":
        """Load credentials and options from environment variables."""
        _load_dotenv()
        api_key = os.getenv("FTX_API_KEY")
        api_secret = os.getenv("FTX_API_SECRET")
        if not api_key or not api_secret:
            raise EnvironmentError(
                "FTX_API_KEY and FTX_API_SECRET must be set as environment variables."
            )

        timeout_str = os.getenv("FTX_TIMEOUT", "10")
        try:
            timeout = float(timeout_str)
        except ValueError as exc:
            raise EnvironmentError(f"FTX_TIMEOUT must be a number, got '{timeout_str}'.") from exc

        return cls(
            api_key=api_key,
            api_secret=api_secret,
            subaccount=os.getenv("FTX_SUBACCOUNT") or None,
            base_url=(os.getenv("FTX_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
            optimized_base_url=(os.getenv("FTX_OPTIMIZED_BASE_URL") or "").rstrip("/") or None,
            timeout=timeout,
        )
