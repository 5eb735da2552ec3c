#version.py
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import regex
from bs4 import BeautifulSoup

from .config import CatalogConfig
from .errors import DataIntegrityError
from .storage import read_json

# The versions page opens with a heading like "Emoji Versions, v16.0" or "Emoji 16.0".
_VERSION_PATTERN = regex.compile(r"Emoji\D*?(\d+\.\d+)")
DEFAULT_VERSION = "0.0"


@dataclass(frozen=True)
class UpdateDecision:
    needed: bool
    reason: str
    latest_version: Optional[str] = None


def now_ms() -> int:
    return int(time.time() * 1000)


def parse_latest_version(html: str) -> str:
    """Returns the emoji version named in the first <h2> of the versions page."""
    heading = BeautifulSoup(html, "html.parser").find("h2")
    text = heading.get_text(" ", strip=True) if heading else ""
    match = _VERSION_PATTERN.search(text)
    if not match:
        raise DataIntegrityError(f"Could not determine latest emoji version from heading {text!r}")
    return match.group(1)


def is_refresh_due(last_update_ms: int, interval_ms: int, now: int) -> bool:
    return now - last_update_ms > interval_ms


def check_for_updates(config: CatalogConfig, fetch_text: Callable[[str], str],
                      clock: Callable[[], int] = now_ms) -> UpdateDecision:
    """
    Decides whether the catalog should be regenerated.

    No previous stats file means an update is needed. Otherwise the versions page is
    consulted once `config.version_check_interval` has passed since the last update,
    and a different version triggers the update. If the check itself fails the
    answer is "update needed".
    """
    try:
        stats = read_json(config.stats_path)
        if stats is None:
            return UpdateDecision(True, "No existing stats file found. Will download fresh data.")

        last_update = stats.get("last_update") or 0
        if not is_refresh_due(last_update, config.version_check_interval, clock()):
            return UpdateDecision(False, "Version check interval not reached yet.")

        logging.info("Update check interval reached. Checking for new version...")
        latest = parse_latest_version(fetch_text(config.emoji_version_url))
        current = stats.get("emoji_version") or DEFAULT_VERSION
        if latest != current:
            return UpdateDecision(True, f"New emoji version available: {latest} (current: {current})", latest)
        return UpdateDecision(False, f"Emoji version {current} is current.", latest)
    except Exception as e:
        logging.error(f"Error checking for updates: {e}", exc_info=True)
        return UpdateDecision(True, "Update check failed; assuming an update is needed.")
