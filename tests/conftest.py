"""
Pytest Configuration and Fixtures
"""

import pytest
import sys
from pathlib import Path
from unittest.mock import MagicMock

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def make_market(**overrides) -> dict:
    """Build a raw Gamma market record that passes every processing gate."""
    market = {
        "id": "512345",
        "slug": "will-bitcoin-reach-150k-by-2027",
        "question": "Will Bitcoin reach $150,000 by 2027?",
        "description": "Resolves Yes if BTC trades above $150,000 on Coinbase.",
        "outcomes": "[\"Yes\", \"No\"]",
        "outcomePrices": "[\"0.73\", \"0.27\"]",
        "volume": "125000.50",
        "active": True,
        "closed": False,
        "endDate": "2027-12-31T12:00:00Z",
        "startDate": "2025-01-15T00:00:00Z",
        "tags": [{"id": "21", "label": "Crypto"}],
    }
    market.update(overrides)
    return market


def make_response(status_code=200, json_data=None, headers=None):
    """Build a mock requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.headers = headers or {}
    response.json.return_value = json_data
    return response


@pytest.fixture
def market_factory():
    """Provide the raw market builder."""
    return make_market


@pytest.fixture
def response_factory():
    """Provide the mock response builder."""
    return make_response


@pytest.fixture
def sample_market():
    """Provide a raw market that becomes a Crypto prediction for 2027."""
    return make_market()


@pytest.fixture
def sample_markets():
    """Provide a mixed batch of raw markets."""
    return [
        make_market(),
        make_market(
            id="2",
            question="Will Tesla stock close above $400 in 2026?",
            description="",
            outcomes=["Yes", "No"],
            outcomePrices=["0.35", "0.65"],
            volume="80000",
        ),
        make_market(
            id="3",
            question="Will gold fall below $2,000 by June 2026?",
            description="",
            outcomePrices="[\"0.82\", \"0.18\"]",
        ),
        make_market(id="4", question="Will the Lakers win the 2026 NBA title?", description=""),
        make_market(id="5", volume="1200"),
        make_market(id="6", question=""),
    ]


@pytest.fixture
def mock_session():
    """Provide a mock requests session."""
    session = MagicMock()
    session.headers = {}
    return session
