"""
Text Extractor

Extracts typed fields from free-text market questions.
Uses ordered regex/keyword tables - no model inference, no I/O.

Extracts:
- "Will BTC hit $150k by 2027?" → year 2027
- "TSLA stock above $400" → ticker TSLA, price target 400.0
- "Will gold rise above $3,000" → category Commodities, signal bullish/bearish
- 0.8 → confidence "fact"

All tables are ordered lists: the first entry that matches wins.
"""

import logging
import re
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)


MIN_YEAR = 2025
MAX_YEAR = 2040

_YEAR = r'(202[5-9]|203[0-9])'

# Priority order: bare year first, then contextual forms.
YEAR_PATTERNS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r'\b' + _YEAR + r'\b'), "bare_year"),
    (re.compile(r'by\s+' + _YEAR, re.IGNORECASE), "by_year"),
    (re.compile(r'in\s+' + _YEAR, re.IGNORECASE), "in_year"),
    (re.compile(r'before\s+' + _YEAR, re.IGNORECASE), "before_year"),
    (re.compile(r'after\s+' + _YEAR, re.IGNORECASE), "after_year"),
    (re.compile(r'Q[1-4]\s+' + _YEAR, re.IGNORECASE), "quarter_year"),
    (
        re.compile(
            r'(january|february|march|april|may|june|july|august|september|october|november|december)\s+'
            + _YEAR,
            re.IGNORECASE
        ),
        "month_year"
    ),
    (
        re.compile(
            r'(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)\.?\s+' + _YEAR,
            re.IGNORECASE
        ),
        "month_abbrev_year"
    ),
]

# Checked top to bottom; a text matching several categories gets the first.
CATEGORY_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("Equities", (
        "stock", "share", "equity", "s&p", "nasdaq", "dow", "ipo",
        "apple", "google", "microsoft", "amazon", "tesla", "nvidia", "meta",
        "tsla", "aapl", "googl", "msft", "amzn", "nvda",
    )),
    ("Commodities", (
        "gold", "silver", "oil", "crude", "copper", "platinum",
        "commodity", "wheat", "corn", "natural gas", "wti", "brent",
    )),
    ("Crypto", (
        "bitcoin", "ethereum", "crypto", "btc", "eth", "blockchain",
        "solana", "cardano", "altcoin", "defi",
    )),
    ("Indices", (
        "index", "indices", "s&p 500", "nasdaq 100", "dow jones",
        "russell", "vix", "market index",
    )),
    ("Forex", (
        "dollar", "euro", "yen", "pound", "currency", "forex", "fx",
        "usd", "eur", "gbp", "jpy", "exchange rate",
    )),
    ("Economy", (
        "fed", "interest rate", "inflation", "recession", "gdp",
        "unemployment", "cpi", "treasury", "bond", "yield",
    )),
]

OTHER_CATEGORY = "Other"

KNOWN_TICKERS = (
    "AAPL", "GOOGL", "MSFT", "AMZN", "TSLA", "NVDA", "META",
    "NFLX", "AMD", "INTC", "BA", "GE", "F", "GM",
)

TICKER_PATTERNS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r'\b([A-Z]{1,5})\s+stock', re.IGNORECASE), "stock_suffix"),
    (re.compile(r'\$([A-Z]{1,5})\b'), "cashtag"),
    (re.compile(r'ticker:\s*([A-Z]{1,5})', re.IGNORECASE), "ticker_label"),
    (re.compile(r'\b(' + "|".join(KNOWN_TICKERS) + r')\b'), "known_symbol"),
]

PRICE_PATTERNS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r'\$(\d{1,3}(?:,\d{3})*(?:\.\d{2})?)'), "dollar_amount"),
    (re.compile(r'price\s+(?:of|at|to)\s+\$(\d+)', re.IGNORECASE), "price_of"),
    (re.compile(r'reach\s+\$(\d+)', re.IGNORECASE), "reach"),
    (re.compile(r'above\s+\$(\d+)', re.IGNORECASE), "above"),
    (re.compile(r'below\s+\$(\d+)', re.IGNORECASE), "below"),
]

BEARISH_WORDS = ("below", "fall", "decline", "drop", "crash", "less than", "under")
BULLISH_WORDS = ("above", "rise", "increase", "surge", "rally", "more than", "over", "reach")

BULLISH = "bullish"
BEARISH = "bearish"
NEUTRAL = "neutral"

SIGNAL_HIGH = 0.6
SIGNAL_LOW = 0.4

# (threshold, tier), highest first
CONFIDENCE_TIERS: List[Tuple[float, str]] = [
    (0.75, "fact"),
    (0.60, "likely"),
]
DEFAULT_CONFIDENCE = "uncertain"


def extract_year(text: Optional[str]) -> Optional[int]:
    """
    Extract the target year from text.

    Patterns are tried in priority order. For the first pattern that
    matches, the last captured group is the year (month/quarter patterns
    capture a prefix group first).

    Args:
        text: Question or description text

    Returns:
        Year in [2025, 2040] or None
    """
    if not text:
        return None

    for pattern, _pattern_type in YEAR_PATTERNS:
        match = pattern.search(text)
        if match is None:
            continue

        try:
            year = int(match.group(match.lastindex or 0))
        except (TypeError, ValueError):
            continue

        if MIN_YEAR <= year <= MAX_YEAR:
            return year

    return None


def categorize_event(title: Optional[str], description: Optional[str] = "") -> str:
    """
    Assign a finance category from keyword hits.

    Returns "Other" when no keyword set matches.
    """
    text = f"{title or ''} {description or ''}".lower()

    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category

    return OTHER_CATEGORY


def extract_ticker(text: Optional[str]) -> Optional[str]:
    """Extract a stock ticker symbol, upper-cased."""
    if not text:
        return None

    for pattern, _pattern_type in TICKER_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1).upper()

    return None


def extract_price_target(text: Optional[str]) -> Optional[float]:
    """Extract the first dollar price target, thousands separators stripped."""
    if not text:
        return None

    for pattern, pattern_type in PRICE_PATTERNS:
        match = pattern.search(text)
        if match is None:
            continue

        try:
            return float(match.group(1).replace(",", ""))
        except ValueError as e:
            logger.debug(f"Price parsing error ({pattern_type}): {e}")
            continue

    return None


def is_bearish_phrasing(question: str) -> bool:
    text = question.lower()
    return any(word in text for word in BEARISH_WORDS)


def is_bullish_phrasing(question: str) -> bool:
    text = question.lower()
    return any(word in text for word in BULLISH_WORDS)


def determine_signal(question: Optional[str], prob: float) -> str:
    """
    Combine question phrasing with probability into a directional signal.

    A likely bearish outcome is bearish; an unlikely bearish outcome is
    read as bullish (and the mirror image for bullish phrasing). Anything
    in the [0.4, 0.6] band, or with no directional phrasing, is neutral.

    Args:
        question: Market question text
        prob: Probability of the "Yes" outcome

    Returns:
        "bullish", "bearish" or "neutral"
    """
    if not question:
        return NEUTRAL

    bearish = is_bearish_phrasing(question)
    bullish = is_bullish_phrasing(question)

    if bearish and prob > SIGNAL_HIGH:
        return BEARISH
    if bullish and prob > SIGNAL_HIGH:
        return BULLISH
    if bearish and prob < SIGNAL_LOW:
        return BULLISH
    if bullish and prob < SIGNAL_LOW:
        return BEARISH

    return NEUTRAL


def get_confidence(prob: float) -> str:
    """Bucket a probability into fact / likely / uncertain."""
    for threshold, tier in CONFIDENCE_TIERS:
        if prob >= threshold:
            return tier
    return DEFAULT_CONFIDENCE


class TextExtractor:
    """
    Facade over the module-level extraction functions.
    """

    extract_year = staticmethod(extract_year)
    categorize_event = staticmethod(categorize_event)
    extract_ticker = staticmethod(extract_ticker)
    extract_price_target = staticmethod(extract_price_target)
    determine_signal = staticmethod(determine_signal)
    get_confidence = staticmethod(get_confidence)

    @classmethod
    def extract_all(cls, question: str, description: str = "", prob: float = 0.0) -> dict:
        """
        Run every extractor over a question.

        Args:
            question: Market question
            description: Optional market description
            prob: "Yes" probability used for signal and confidence

        Returns:
            Dictionary of extracted fields
        """
        combined = f"{question} {description or ''}"
        return {
            "year": cls.extract_year(question) or cls.extract_year(description),
            "category": cls.categorize_event(question, description),
            "ticker": cls.extract_ticker(combined),
            "price_target": cls.extract_price_target(combined),
            "signal": cls.determine_signal(question, prob),
            "confidence": cls.get_confidence(prob),
        }
