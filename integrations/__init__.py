"""
Integrations Module

External service integrations:
- Polymarket Gamma API client
"""

from .polymarket_client import (
    PolymarketClient,
    FetchResult,
    get_polymarket_client,
    END_OF_DATA,
    RETRIES_EXHAUSTED
)

__all__ = [
    "PolymarketClient",
    "FetchResult",
    "get_polymarket_client",
    "END_OF_DATA",
    "RETRIES_EXHAUSTED"
]
