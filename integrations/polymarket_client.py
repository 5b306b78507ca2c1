"""
Polymarket Client

Fetches active markets from the Polymarket Gamma API with pagination.

Rate limits (Cloudflare, per 10 seconds):
- General Gamma requests: 4,000
- /markets endpoint: 300

Exceeding them returns 429 Too Many Requests, usually with a Retry-After
header giving the pause in seconds.
"""

import logging
import os
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


END_OF_DATA = "end_of_data"
RETRIES_EXHAUSTED = "retries_exhausted"


@dataclass(frozen=True)
class FetchResult:
    """
    Markets accumulated by one fetch.

    `stopped_reason` is None when `max_records` was reached, otherwise why
    pagination ended early. Partial results are not an error.
    """
    markets: List[Dict[str, Any]] = field(default_factory=list)
    stopped_reason: Optional[str] = None
    pages_fetched: int = 0

    @property
    def complete(self) -> bool:
        return self.stopped_reason in (None, END_OF_DATA)

    def __len__(self) -> int:
        return len(self.markets)


class PolymarketClient:
    """
    Client for fetching market listings from Polymarket.

    Uses the public Gamma API. Pages are fetched one at a time.
    """

    GAMMA_URL = "https://gamma-api.polymarket.com"
    PAGE_SIZE = 100
    PAGE_DELAY_MS = 100

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        page_delay_ms: int = PAGE_DELAY_MS,
        session: Optional[requests.Session] = None,
        sleep: Optional[Callable[[float], None]] = None
    ):
        """
        Initialize Polymarket client.

        Args:
            base_url: Gamma API base URL (env POLYMARKET_GAMMA_URL)
            timeout: Request timeout in seconds (env POLYMARKET_TIMEOUT)
            page_delay_ms: Pause between successful pages
            session: Optional pre-configured requests session
            sleep: Sleep function taking seconds (defaults to time.sleep)
        """
        self.base_url = (
            base_url or os.environ.get("POLYMARKET_GAMMA_URL", self.GAMMA_URL)
        ).rstrip("/")
        self.timeout = timeout or float(os.environ.get("POLYMARKET_TIMEOUT", 30))
        self.page_delay_ms = page_delay_ms
        self._sleep = sleep or time.sleep

        self._session = session or requests.Session()
        self._session.headers.update({
            "User-Agent": "MarketOracle/1.0",
            "Accept": "application/json"
        })

    def _wait(self, delay_ms: float) -> None:
        self._sleep(delay_ms / 1000.0)

    @staticmethod
    def _retry_after_ms(response: requests.Response) -> Optional[float]:
        """Parse a Retry-After header given in seconds; fractions are truncated."""
        header = response.headers.get("Retry-After")
        if not header:
            return None
        try:
            return int(float(header.strip())) * 1000
        except (ValueError, OverflowError):
            return None

    def _get_page(self, offset: int) -> requests.Response:
        return self._session.get(
            f"{self.base_url}/markets",
            params={
                "active": "true",
                "closed": "false",
                "limit": self.PAGE_SIZE,
                "offset": offset,
            },
            timeout=self.timeout
        )

    def fetch_markets(
        self,
        max_records: int = 1000,
        retries: int = 3,
        base_delay_ms: int = 1000
    ) -> FetchResult:
        """
        Fetch active markets page by page.

        Never raises for network or HTTP failures: when a page cannot be
        fetched within `retries` attempts, whatever was accumulated so far
        is returned. A page that is still rate limited (429) after the last
        attempt is skipped and pagination moves on to the next offset.

        Args:
            max_records: Stop once this many markets are collected
            retries: Attempts per page
            base_delay_ms: Base for exponential backoff (base * 2^attempt)

        Returns:
            FetchResult with at most `max_records` markets
        """
        markets: List[Dict[str, Any]] = []
        offset = 0
        pages = 0

        while len(markets) < max_records:
            page: Optional[List[Dict[str, Any]]] = None
            rate_limited = False

            for attempt in range(retries):
                rate_limited = False
                try:
                    response = self._get_page(offset)

                    if response.status_code == 429:
                        rate_limited = True
                        wait_ms = self._retry_after_ms(response)
                        if wait_ms is None:
                            wait_ms = base_delay_ms * (2 ** attempt)
                        logger.warning(
                            f"Rate limited. Retrying in {wait_ms / 1000:.1f}s... "
                            f"(Attempt {attempt + 1}/{retries})"
                        )
                        self._wait(wait_ms)
                        continue

                    if not response.ok:
                        raise requests.HTTPError(
                            f"Polymarket API error: HTTP {response.status_code}",
                            response=response
                        )

                    data = response.json() or []
                    if not isinstance(data, list):
                        raise ValueError(f"Expected a list of markets, got {type(data).__name__}")
                    page = data
                    break

                except (requests.exceptions.RequestException, ValueError) as e:
                    if attempt == retries - 1:
                        logger.error(f"Error fetching Polymarket markets at offset {offset}: {e}")
                        break
                    logger.warning(
                        f"Request failed at offset {offset} "
                        f"(Attempt {attempt + 1}/{retries}): {e}"
                    )
                    self._wait(base_delay_ms * (2 ** attempt))

            if page is None and rate_limited:
                # Still throttled after the last attempt: skip this page.
                logger.warning(
                    f"Still rate limited after {retries} attempts at offset {offset}; "
                    f"skipping to offset {offset + self.PAGE_SIZE}"
                )
                offset += self.PAGE_SIZE
                self._wait(self.page_delay_ms)
                continue

            if page is None:
                logger.error(
                    f"Giving up after {retries} attempts at offset {offset}; "
                    f"returning {len(markets)} markets"
                )
                return FetchResult(
                    markets=markets[:max_records],
                    stopped_reason=RETRIES_EXHAUSTED,
                    pages_fetched=pages
                )

            if len(page) == 0:
                logger.info(f"No more markets available (fetched {len(markets)} total)")
                return FetchResult(
                    markets=markets[:max_records],
                    stopped_reason=END_OF_DATA,
                    pages_fetched=pages
                )

            markets.extend(page)
            pages += 1
            logger.info(f"Fetched {len(page)} markets ({len(markets)} total so far...)")

            offset += self.PAGE_SIZE
            self._wait(self.page_delay_ms)

        return FetchResult(markets=markets[:max_records], pages_fetched=pages)

    def fetch_markets_list(
        self,
        max_records: int = 1000,
        retries: int = 3,
        base_delay_ms: int = 1000
    ) -> List[Dict[str, Any]]:
        """Fetch markets and return only the list."""
        return self.fetch_markets(max_records, retries, base_delay_ms).markets


# Module-level singleton
_client: Optional[PolymarketClient] = None


def get_polymarket_client() -> PolymarketClient:
    """Get Polymarket client singleton."""
    global _client
    if _client is None:
        _client = PolymarketClient()
    return _client
