#errors.py
from typing import List, Optional


class EmojiCatalogError(Exception):
    """Base class for every error raised while building the catalog."""


class FetchError(EmojiCatalogError):
    def __init__(self, url: str, message: str, attempts: int = 1):
        super().__init__(f"{message} ({url})")
        self.url = url
        self.attempts = attempts


class TransientFetchError(FetchError):
    """A single attempt failed (timeout, connection problem, bad status). Retried."""


class FatalFetchError(FetchError):
    """The retry ceiling was reached without a successful response."""

    def __init__(self, url: str, message: str, attempts: int = 1,
                 last_error: Optional[Exception] = None):
        super().__init__(url, message, attempts)
        self.last_error = last_error


class MalformedRowError(EmojiCatalogError):
    """A row had all of its cells but the code-point field could not be read."""

    def __init__(self, code_text: str, reason: str, name: Optional[str] = None):
        where = f" in row '{name}'" if name else ""
        super().__init__(f"Malformed code point field {code_text!r}{where}: {reason}")
        self.code_text = code_text
        self.name = name


class DataIntegrityError(EmojiCatalogError):
    """Parsed data does not add up (missing or negative totals, dangling references)."""


class SelfTestFailure(EmojiCatalogError):
    def __init__(self, failures: List[str]):
        super().__init__(f"{len(failures)} self-test check(s) failed: " + "; ".join(failures))
        self.failures = failures
