#fetcher.py
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import httpx

from .config import CatalogConfig
from .errors import FatalFetchError, TransientFetchError


@dataclass(frozen=True)
class FetchResult:
    """Outcome of a bounded fetch: either the page text or the error that ended it."""
    url: str
    attempts: int
    text: Optional[str] = None
    error: Optional[FatalFetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> str:
        """Returns the page text or raises the FatalFetchError that ended the fetch."""
        if self.error is not None:
            raise self.error
        return self.text


def build_client(config: CatalogConfig, transport: Optional[httpx.BaseTransport] = None) -> httpx.Client:
    """Creates the HTTP client shared by every fetch of one run."""
    return httpx.Client(
        timeout=config.timeout,
        follow_redirects=True,
        headers={"User-Agent": config.user_agent},
        transport=transport,
    )


class Fetcher:
    """
    Fetches pages with a bounded number of attempts.

    Each attempt is aborted by httpx once `config.timeout` seconds pass. Timeouts,
    connection errors, any other httpx request error and non-2xx responses are retried after `config.retry_delay`
    seconds (multiplied by `config.backoff_factor` after each failure) until
    `config.max_attempts` is reached.
    """

    def __init__(self, client: httpx.Client, config: CatalogConfig,
                 sleep: Callable[[float], None] = time.sleep):
        self.client = client
        self.config = config
        self._sleep = sleep

    def _attempt(self, url: str) -> str:
        try:
            response = self.client.get(url)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise TransientFetchError(url, f"Request timeout after {self.config.timeout} seconds") from e
        except httpx.HTTPStatusError as e:
            raise TransientFetchError(url, f"HTTP error! status: {e.response.status_code}") from e
        except httpx.TransportError as e:
            raise TransientFetchError(url, f"Request failed: {e}") from e
        except httpx.RequestError as e:
            # Redirect loops, undecodable bodies and the like.
            raise TransientFetchError(url, f"Request failed: {type(e).__name__}: {e}") from e
        return response.text

    def fetch(self, url: str) -> FetchResult:
        delay = self.config.retry_delay
        last_error = None
        for attempt in range(1, self.config.max_attempts + 1):
            logging.info(f"Attempting to fetch {url} (attempt {attempt}/{self.config.max_attempts})...")
            try:
                text = self._attempt(url)
            except TransientFetchError as e:
                last_error = e
                logging.warning(str(e))
                if attempt < self.config.max_attempts:
                    logging.info(f"Retrying in {delay:g} seconds...")
                    self._sleep(delay)
                    delay *= self.config.backoff_factor
                continue
            logging.info(f"Downloaded {len(text)} characters from {url}")
            return FetchResult(url=url, attempts=attempt, text=text)

        attempts = self.config.max_attempts
        return FetchResult(url=url, attempts=attempts, error=FatalFetchError(
            url, f"Giving up after {attempts} attempt(s)", attempts=attempts, last_error=last_error,
        ))

    def fetch_text(self, url: str) -> str:
        """Like fetch(), but raises FatalFetchError instead of returning a failed result."""
        return self.fetch(url).unwrap()
