"""Bilingual keyword vocabularies used to classify policy paragraphs.

Rules are grouped by category and language. English terms are matched on word
boundaries; Hebrew terms are matched as substrings because Hebrew attaches
prepositions and articles as letter prefixes ("בכפוף", "להחזר").
"""

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, List, Mapping, Pattern, Tuple

from rights_engine.models.evidence import Language


class KeywordCategory(str, Enum):
    RIGHT = "right"
    EXCLUSION = "exclusion"
    SERVICE = "service"
    CONDITIONAL = "conditional"
    CERTAIN = "certain"
    AMOUNT = "amount"
    PREAPPROVAL = "preapproval"
    WAITING_PERIOD = "waiting_period"
    REIMBURSEMENT = "reimbursement"


@dataclass(frozen=True)
class KeywordRule:
    category: KeywordCategory
    language: Language
    pattern: Pattern[str]


@dataclass(frozen=True)
class TopicRule:
    tag: str
    pattern: Pattern[str]


def _english(category: KeywordCategory, terms: Iterable[str]) -> KeywordRule:
    alternation = "|".join(terms)
    return KeywordRule(
        category, Language.ENGLISH, re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)
    )


def _hebrew(category: KeywordCategory, terms: Iterable[str]) -> KeywordRule:
    alternation = "|".join(re.escape(term) for term in terms)
    return KeywordRule(category, Language.HEBREW, re.compile(alternation))


KEYWORD_RULES: Tuple[KeywordRule, ...] = (
    _english(KeywordCategory.RIGHT, [
        r"entitle\w*", "covered", "covers", "coverage", r"reimburs\w*", r"compensat\w*",
        r"indemnif\w*", "benefits?", r"eligib\w*", r"(?:will|shall) pay",
    ]),
    _hebrew(KeywordCategory.RIGHT, [
        "זכאי", "זכאית", "זכאים", "זכאות", "מכסה", "מכוסה", "מכוסים", "כיסוי", "שיפוי",
        "ישפה", "תגמול", "החזר", "פיצוי", "יפצה", "ישולם", "הטבה",
    ]),
    _english(KeywordCategory.EXCLUSION, [
        "not covered", "excluded", "except", "does not cover",
        r"(?:will|shall) not (?:pay|cover|be covered)",
    ]),
    _hebrew(KeywordCategory.EXCLUSION, [
        "לא יכוסה", "לא יכוסו", "אינו מכוסה", "אינה מכוסה", "אינם מכוסים", "לא מכוסה",
        "לא מכוסים", "אין כיסוי", "לא ישולם", "לא ישלם", "חריג", "למעט", "מלבד",
    ]),
    _english(KeywordCategory.SERVICE, [
        "services?", "assistance", "helpline", "hotline", "support", r"call cent(?:er|re)",
    ]),
    _hebrew(KeywordCategory.SERVICE, [
        "שירות", "סיוע", "ייעוץ", "מוקד", "תמיכה", "הנחה", "קו חם",
    ]),
    _english(KeywordCategory.CONDITIONAL, [
        "subject to", r"(?:prior |pending |pre-?)?approval", "approved by",
        r"pre-?authori[sz]ation", "waiting period", "qualifying period", "provided that",
        "on condition that", r"conditional (?:up)?on",
    ]),
    _hebrew(KeywordCategory.CONDITIONAL, [
        "בכפוף ל", "באישור", "תקופת המתנה", "בתנאי ש", "מותנה", "תקופת אכשרה",
        "לאחר אישור", "אישור מראש",
    ]),
    _english(KeywordCategory.CERTAIN, [
        r"entitle\w*", r"(?:will|shall) (?:pay|reimburse|indemnify|compensate)",
        "guaranteed", "is covered", "are covered",
    ]),
    _hebrew(KeywordCategory.CERTAIN, [
        "זכאי", "זכאית", "זכאים", "ישלם", "ישולם", "ישפה", "יפצה", "מכוסה",
    ]),
    _english(KeywordCategory.AMOUNT, [
        "ILS", "NIS", "USD", "EUR", "GBP", "shekels?", "dollars?", "amount", "sum insured",
        "limit", "maximum", "up to",
    ]),
    _hebrew(KeywordCategory.AMOUNT, [
        "₪", 'ש"ח', "ש״ח", "שקל", "סכום", "תקרה", "עד לסך", "עד סך", "מקסימום",
        "לכל היותר",
    ]),
    _english(KeywordCategory.PREAPPROVAL, [
        r"pre-?authori[sz]ation", r"(?:prior |pre-?)approval", "approved in advance",
    ]),
    _hebrew(KeywordCategory.PREAPPROVAL, [
        "אישור מראש", "באישור", "לאחר אישור", "התחייבות",
    ]),
    _english(KeywordCategory.WAITING_PERIOD, ["waiting period", "qualifying period"]),
    _hebrew(KeywordCategory.WAITING_PERIOD, ["תקופת המתנה", "תקופת אכשרה"]),
    _english(KeywordCategory.REIMBURSEMENT, [r"reimburs\w*", "refunds?"]),
    _hebrew(KeywordCategory.REIMBURSEMENT, ["החזר", "שיפוי", "ישפה"]),
)

RULES_BY_CATEGORY: Mapping[KeywordCategory, Tuple[KeywordRule, ...]] = MappingProxyType({
    category: tuple(rule for rule in KEYWORD_RULES if rule.category == category)
    for category in KeywordCategory
})


TOPIC_RULES: Tuple[TopicRule, ...] = tuple(
    TopicRule(tag, re.compile(pattern, re.IGNORECASE))
    for tag, pattern in (
        ("hospitalization", r"\bhospital\w*|אשפוז|בית חולים|בתי חולים"),
        ("surgery", r"\bsurg\w*|\boperations?\b|ניתוח"),
        ("medication", r"\bmedications?\b|\bdrugs?\b|\bprescriptions?\b|תרופ"),
        ("diagnostics", r"\bdiagnos\w*|\bscans?\b|\bMRI\b|בדיק|אבחון"),
        ("dental", r"\bdental\b|\bteeth\b|\btooth\b|שיניים|דנטלי"),
        ("maternity", r"\bpregnan\w*|\bmaternity\b|\bchildbirth\b|הריון|לידה"),
        ("ambulance", r"\bambulance\w*|אמבולנס|פינוי"),
        ("abroad", r"\babroad\b|\boverseas\b|\btravel\w*|חו\"ל|חו״ל|בחוץ לארץ"),
        ("rehabilitation", r"\brehabilitat\w*|\bphysiotherap\w*|שיקום|פיזיותרפיה"),
        ("mental_health", r"\bmental\b|\bpsychiatr\w*|\bpsycholog\w*|נפשי|פסיכיאטר|פסיכולוג"),
        ("critical_illness", r"\bcritical illness\b|מחלה קשה|מחלות קשות"),
        ("death", r"\bdeath\b|\bdeceased\b|מוות|פטירה"),
        ("disability", r"\bdisabilit\w*|נכות"),
        ("transplant", r"\btransplant\w*|השתל"),
        ("second_opinion", r"\bsecond opinion\b|חוות דעת שני"),
    )
)

# Numbers carrying a currency marker on either side: "5,000 ILS", "₪200", "1,500 ש"ח".
NUMERIC_CURRENCY_PATTERN: Pattern[str] = re.compile(
    r"(?:[₪$€£]\s?\d[\d,]*(?:\.\d+)?"
    r"|\d[\d,]*(?:\.\d+)?\s?(?:₪|ש[\"״]ח|שקלים|שקל|\bILS\b|\bNIS\b|\bUSD\b|\bEUR\b|\bGBP\b"
    r"|\bshekels?\b|\bdollars?\b))",
    re.IGNORECASE,
)


def matching_rules(text: str, category: KeywordCategory) -> List[KeywordRule]:
    """Return the rules of a category that match anywhere in text."""
    if not text:
        return []
    return [rule for rule in RULES_BY_CATEGORY[category] if rule.pattern.search(text)]


def has_keyword(text: str, category: KeywordCategory) -> bool:
    return bool(matching_rules(text, category))


def find_terms(text: str, category: KeywordCategory) -> List[str]:
    """Return the distinct surface terms of a category found in text, in text order."""
    found = []
    for rule in RULES_BY_CATEGORY[category]:
        for match in rule.pattern.finditer(text or ""):
            found.append((match.start(), match.group(0).strip()))
    terms: List[str] = []
    for _, term in sorted(found):
        if term.lower() not in (t.lower() for t in terms):
            terms.append(term)
    return terms


def match_topics(text: str) -> List[str]:
    return [rule.tag for rule in TOPIC_RULES if rule.pattern.search(text or "")]
