import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

DEFAULT_BASE_URL = "https://api.unsplash.com"
DEFAULT_TIMEOUT = 15.0
DEFAULT_PAGE_SIZE = 20


@dataclass(frozen=True)
class Settings:
    access_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def is_configured(self) -> bool:
        return bool(self.access_key)


def _read_number(name: str, default, cast):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def load_settings(dotenv: bool = True) -> Settings:
    """
    Build settings from the environment.

    Args:
        dotenv: Load a .env file into the environment first (existing
            variables win over the file)

    Returns:
        Settings with defaults filled in for anything not set
    """
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True))

    return Settings(
        access_key=os.environ.get("UNSPLASH_ACCESS_KEY") or None,
        base_url=(os.environ.get("UNSPLASH_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
        timeout=_read_number("UNSPLASH_TIMEOUT", DEFAULT_TIMEOUT, float),
        page_size=_read_number("UNSPLASH_PAGE_SIZE", DEFAULT_PAGE_SIZE, int),
    )
