"""Monetary amount extraction, gated on the presence of a schedule document.

Policy wording often quotes limits that the schedule overrides, so numbers are
only surfaced when the run includes a schedule document to back them.
"""

import re
from typing import Dict, List, Optional, Pattern, Tuple

from rights_engine.models.benefits import AmountValue, Amounts, ValueState
from rights_engine.services.rules.keyword_rules import (
    NUMERIC_CURRENCY_PATTERN,
    KeywordCategory,
    has_keyword,
)
from rights_engine.utils.logging import get_logger

LOGGER = get_logger(__name__)

_NUMBER = r"(?<![\d.,])(?P<num>\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?)"
_HEBREW_WORD_START = r"(?<![א-ת])"
_CURRENCY = r"₪|ש[\"״]ח|שקלים|שקל|ILS|NIS|USD|EUR|GBP|shekels?|dollars?|[$€£]"
_NOT_A_UNIT = (
    r"(?!\d|[.,]\d|\s*(?:%|days?|weeks?|months?|years?|hours?|times|visits?|treatments?|sessions?"
    r"|ימים|יום|שבועות|חודשים|חודש|שנים|שנה|שעות|פעמים|ביקורים|טיפולים))"
)

CURRENCY_CODES: Dict[str, str] = {
    "₪": "ILS",
    'ש"ח': "ILS",
    "ש״ח": "ILS",
    "שקל": "ILS",
    "שקלים": "ILS",
    "ils": "ILS",
    "nis": "ILS",
    "shekel": "ILS",
    "shekels": "ILS",
    "$": "USD",
    "usd": "USD",
    "dollar": "USD",
    "dollars": "USD",
    "€": "EUR",
    "eur": "EUR",
    "£": "GBP",
    "gbp": "GBP",
}


def _amount_pattern(lead: str) -> Pattern[str]:
    return re.compile(
        lead
        + rf"(?:(?P<prefix>{_CURRENCY})\s?)?"
        + _NUMBER
        + _NOT_A_UNIT
        + rf"(?:\s?(?P<suffix>{_CURRENCY}))?",
        re.IGNORECASE,
    )


# Evaluated in order; the first rule to claim a number position wins.
AMOUNT_PATTERNS: Tuple[Tuple[str, Pattern[str]], ...] = (
    ("up_to", _amount_pattern(r"\b(?:up to|not exceeding|no more than)\s+")),
    ("maximum", _amount_pattern(r"\b(?:maximum(?: of)?|max\.|limit of)\s+")),
    ("up_to", _amount_pattern(_HEBREW_WORD_START + r"ו?עד\s+(?:ל?סך\s+(?:של\s+)?|לסכום\s+(?:של\s+)?)?")),
    ("maximum", _amount_pattern(_HEBREW_WORD_START + r"(?:מקסימום|לכל היותר|תקרה של|תקרת)\s+")),
    ("currency_suffix", re.compile(
        _NUMBER + rf"\s?(?P<suffix>{_CURRENCY})", re.IGNORECASE
    )),
    ("currency_prefix", re.compile(
        rf"(?P<prefix>{_CURRENCY})\s?" + _NUMBER, re.IGNORECASE
    )),
)


def mentions_amount(text: str) -> bool:
    """Whether a chunk carries a currency/amount keyword or a numeric currency figure."""
    return has_keyword(text, KeywordCategory.AMOUNT) or bool(NUMERIC_CURRENCY_PATTERN.search(text or ""))


def parse_number(raw: str) -> Optional[float]:
    try:
        return float(raw.replace(",", ""))
    except ValueError:
        return None


def currency_code(token: Optional[str]) -> Optional[str]:
    if not token:
        return None
    return CURRENCY_CODES.get(token.strip().lower()) or CURRENCY_CODES.get(token.strip())


def parse_amounts(text: str) -> List[AmountValue]:
    """Parse monetary figures from text, one value per number position."""
    claimed: Dict[int, AmountValue] = {}
    for kind, pattern in AMOUNT_PATTERNS:
        for match in pattern.finditer(text):
            number_start = match.start("num")
            if number_start in claimed:
                continue
            numeric = parse_number(match.group("num"))
            if numeric is None:
                continue
            groups = match.groupdict()
            claimed[number_start] = AmountValue(
                raw=match.group(0).strip(),
                numeric=numeric,
                position=match.start(),
                currency=currency_code(groups.get("prefix") or groups.get("suffix")),
            )
            LOGGER.debug(
                f"Matched {kind} amount {numeric}",
                extra={"kind": kind, "raw": match.group(0)},
            )
    return sorted(claimed.values(), key=lambda value: value.position)


def extract_amounts(text: str, has_schedule: bool) -> Amounts:
    """Extract amounts for a benefit chunk.

    Args:
        text: Benefit chunk
        has_schedule: Whether any schedule document is present in the run

    Returns:
        Amounts with value_state unknown_schedule_required and no values when
        there is no schedule; otherwise known with any parsed values
    """
    if not has_schedule:
        return Amounts(value_state=ValueState.UNKNOWN_SCHEDULE_REQUIRED, values=[])
    if not mentions_amount(text):
        return Amounts(value_state=ValueState.KNOWN, values=[])
    return Amounts(value_state=ValueState.KNOWN, values=parse_amounts(text))
