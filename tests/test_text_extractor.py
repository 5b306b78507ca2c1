"""
Tests for Text Extractor
"""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from pipeline.text_extractor import (
    TextExtractor,
    YEAR_PATTERNS,
    CATEGORY_KEYWORDS,
    extract_year,
    categorize_event,
    extract_ticker,
    extract_price_target,
    determine_signal,
    get_confidence
)


class TestExtractYear:
    """Tests for year extraction."""

    def test_by_year(self):
        assert extract_year("Will the Fed cut rates by 2027?") == 2027

    def test_quarter_year(self):
        assert extract_year("Apple earnings beat in Q3 2026") == 2026

    def test_month_year(self):
        assert extract_year("Bitcoin above $100k on December 2028?") == 2028
        assert extract_year("ETH flips BTC by Sept. 2030") == 2030

    def test_out_of_range_year_rejected(self):
        assert extract_year("Did the S&P close up in 2024?") is None
        assert extract_year("Mars colony by 2041") is None

    def test_empty_text(self):
        assert extract_year("") is None
        assert extract_year(None) is None

    def test_first_pattern_wins(self):
        """Bare year is checked before 'by YEAR', so the earlier year wins."""
        assert extract_year("2026 recession, or recovery by 2030?") == 2026

    def test_earlier_pattern_beats_later_pattern(self):
        """'in YEAR' is listed before the month pattern."""
        text = "Rate cut in 2031 or March 2032"
        # both also hit the bare-year pattern, which returns the first year
        assert extract_year(text) == 2031

    def test_year_patterns_are_ordered(self):
        names = [name for _, name in YEAR_PATTERNS]
        assert names[0] == "bare_year"
        assert names.index("by_year") < names.index("quarter_year") < names.index("month_year")


class TestCategorizeEvent:
    """Tests for keyword categorization."""

    def test_crypto(self):
        assert categorize_event("Will Bitcoin hit $200k?", "") == "Crypto"

    def test_economy(self):
        assert categorize_event("Will the Fed cut rates?", "") == "Economy"

    def test_commodity_beats_crypto(self):
        """Commodities are checked before Crypto."""
        assert categorize_event("Bitcoin or gold: which ends 2026 higher?", "") == "Commodities"

    def test_equities_checked_first(self):
        assert categorize_event("Tesla stock vs bitcoin vs gold", "") == "Equities"

    def test_description_is_considered(self):
        assert categorize_event("Will it happen by 2026?", "Refers to the Japanese yen") == "Forex"

    def test_other(self):
        assert categorize_event("Will the Lakers win the title?", "") == "Other"

    def test_category_order(self):
        order = [name for name, _ in CATEGORY_KEYWORDS]
        assert order == ["Equities", "Commodities", "Crypto", "Indices", "Forex", "Economy"]


class TestExtractTicker:
    """Tests for ticker extraction."""

    def test_stock_suffix(self):
        assert extract_ticker("Will NVDA stock hit $200?") == "NVDA"

    def test_cashtag(self):
        assert extract_ticker("Will $AMD beat earnings in 2026?") == "AMD"

    def test_ticker_label(self):
        assert extract_ticker("Company listing, ticker: rddt") == "RDDT"

    def test_known_symbol(self):
        assert extract_ticker("Will MSFT be the largest company by 2027?") == "MSFT"

    def test_no_ticker(self):
        assert extract_ticker("Will it rain in 2026?") is None
        assert extract_ticker(None) is None


class TestExtractPriceTarget:
    """Tests for price target extraction."""

    def test_thousands_separator(self):
        assert extract_price_target("Will Bitcoin reach $150,000 by 2027?") == 150000.0

    def test_decimal(self):
        assert extract_price_target("Will gas average $3.50 in 2026?") == 3.5

    def test_no_price(self):
        assert extract_price_target("Will the Fed cut rates in 2026?") is None


class TestDetermineSignal:
    """Tests for directional signal."""

    def test_likely_bearish_is_bearish(self):
        assert determine_signal("Will BTC fall below $50k", 0.8) == "bearish"

    def test_unlikely_bullish_is_bearish(self):
        assert determine_signal("Will BTC rise above $50k", 0.2) == "bearish"

    def test_likely_bullish_is_bullish(self):
        assert determine_signal("Will BTC rise above $50k", 0.9) == "bullish"

    def test_unlikely_bearish_is_bullish(self):
        assert determine_signal("Will the S&P crash in 2026?", 0.1) == "bullish"

    @pytest.mark.parametrize("prob", [0.4, 0.5, 0.6])
    def test_middle_band_is_neutral(self, prob):
        assert determine_signal("Will BTC fall below $50k", prob) == "neutral"

    def test_no_phrasing_is_neutral(self):
        assert determine_signal("Will Apple release a car?", 0.9) == "neutral"


class TestGetConfidence:
    """Tests for confidence tiers."""

    def test_tiers(self):
        assert get_confidence(0.75) == "fact"
        assert get_confidence(0.9) == "fact"
        assert get_confidence(0.6) == "likely"
        assert get_confidence(0.74) == "likely"
        assert get_confidence(0.59) == "uncertain"


class TestTextExtractor:
    """Tests for the combined facade."""

    def test_extract_all(self):
        result = TextExtractor.extract_all(
            "Will TSLA stock reach $500 by 2026?",
            "",
            prob=0.8
        )

        assert result["year"] == 2026
        assert result["category"] == "Equities"
        assert result["ticker"] == "TSLA"
        assert result["price_target"] == 500.0
        assert result["signal"] == "bullish"
        assert result["confidence"] == "fact"

    def test_year_falls_back_to_description(self):
        result = TextExtractor.extract_all("Will the Fed cut rates?", "Deadline: end of March 2027")
        assert result["year"] == 2027
