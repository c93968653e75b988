"""Text helpers for benefit harvesting: segmentation, keys, titles and summaries."""

import re
from typing import List, Optional, Pattern, Sequence, Tuple

from rights_engine.utils.logging import get_logger

LOGGER = get_logger(__name__)

BIDI_MARKS_PATTERN = re.compile("[\u200e\u200f\u202a-\u202e\u2066-\u2069]")
WHITESPACE_PATTERN = re.compile(r"\s+")
SENTENCE_END_PATTERN = re.compile(r"(?<=[.!?])\s+|\n+")

LIST_MARKER_PATTERN = re.compile(
    r"^\s*(?:\d+(?:\.\d+)*[.)]|\(\d+\)|\(?[א-ת]['׳]?[.)]|\(?[a-zA-Z][.)]|[•▪●*\-])\s+"
)

CLAUSE_NUMBER_PREFIXES: Tuple[Pattern[str], ...] = (
    re.compile(r"^(?:סעיף|section|clause|article)\s+\d+(?:\.\d+)*[.)]?\s*[-–:]?\s*", re.IGNORECASE),
    re.compile(r"^\(?\d+(?:\.\d+)*[.)]?\s*[-–:]?\s+"),
    re.compile(r"^\(?[א-תa-zA-Z]['׳]?[.)]\s+"),
    re.compile(r"^[•▪●*\-]\s+"),
)

BOILERPLATE_PREFIXES: Tuple[Pattern[str], ...] = (
    re.compile(r"^it is (?:hereby )?(?:agreed|declared|understood)(?: and agreed)? (?:that|as follows)[:,]?\s*", re.IGNORECASE),
    re.compile(r"^subject to the (?:terms|provisions),?(?: conditions,?)?(?: (?:and|&) exclusions)? of this (?:policy|endorsement),?\s*", re.IGNORECASE),
    re.compile(r"^in accordance with (?:the (?:terms|provisions) of )?this (?:policy|endorsement),?\s*", re.IGNORECASE),
    re.compile(r"^(?:under|pursuant to) this (?:policy|section|endorsement),?\s*", re.IGNORECASE),
    re.compile(r"^הרינו (?:לאשר|להצהיר) (?:כי|ש)\s*"),
    re.compile(r"^מוסכם (?:ומוצהר )?(?:בזאת )?(?:כי|ש)\s*"),
    re.compile(r"^בכפוף לתנאי (?:הפוליסה|פוליסה זו)(?: ולסייגיה)?,?\s*"),
    re.compile(r"^(?:על פי|בהתאם ל)(?:תנאי )?(?:פוליסה זו|הפוליסה),?\s*"),
)

RIGHT_PHRASE_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(
        r"\b(?:entitled to(?: receive)?|coverage (?:for|of)|covers?|reimbursement (?:of|for)"
        r"|compensation (?:for|of)|indemnif(?:y|ication) (?:for|against))\s+(?P<phrase>[^.;:\n]+)",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:זכאי(?:ת|ם)?\s+ל|כיסוי\s+(?:ל|עבור|בגין)\s*|שיפוי\s+(?:בגין|עבור|על)\s*"
        r"|פיצוי\s+(?:בגין|עבור)\s*|מכסה\s+(?:את\s+)?)(?P<phrase>[^.;:\n]+)"
    ),
)

MIN_HEADING_TITLE = 5
MAX_HEADING_TITLE = 80
MIN_PHRASE_TITLE = 10
MAX_PHRASE_TITLE = 70
FALLBACK_TITLE_LENGTH = 60
MAX_SUMMARY_LENGTH = 200
ELLIPSIS = "…"


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_PATTERN.sub(" ", text or "").strip()


def segment_paragraphs(text: str, min_length: int = 30, max_length: int = 2000) -> List[str]:
    """Split text into paragraph-like chunks.

    A chunk ends at a blank line or where a line opens with a numbered or
    lettered list marker. Lines are re-joined verbatim so every chunk can be
    found again in the source text.

    Args:
        text: Document text
        min_length: Shortest chunk kept
        max_length: Longest chunk kept

    Returns:
        Chunks within the length bounds, in document order
    """
    chunks: List[str] = []
    current: List[str] = []

    def flush():
        if current:
            chunk = "\n".join(current).strip()
            if chunk:
                chunks.append(chunk)
            current.clear()

    for line in (text or "").split("\n"):
        if not line.strip():
            flush()
            continue
        if current and LIST_MARKER_PATTERN.match(line):
            flush()
        current.append(line)
    flush()

    kept = [chunk for chunk in chunks if min_length <= len(chunk) <= max_length]
    LOGGER.debug(
        f"Segmented {len(chunks)} chunks, kept {len(kept)} within length bounds",
        extra={"chunks": len(chunks), "kept": len(kept)},
    )
    return kept


def chunk_key(chunk: str) -> str:
    """Normalized first-100-characters key used for within-document dedup."""
    return collapse_whitespace(BIDI_MARKS_PATTERN.sub("", chunk)).lower()[:100]


def strip_prefixes(text: str, patterns: Sequence[Pattern[str]]) -> str:
    """Repeatedly strip any leading match of the given patterns."""
    result = text.strip()
    changed = True
    while changed and result:
        changed = False
        for pattern in patterns:
            stripped = pattern.sub("", result, count=1).strip()
            if stripped != result:
                result = stripped
                changed = True
    return result


def clean_benefit_text(text: str) -> str:
    """Drop leading clause numbers and legal boilerplate, collapse whitespace."""
    cleaned = collapse_whitespace(BIDI_MARKS_PATTERN.sub("", text))
    return strip_prefixes(cleaned, CLAUSE_NUMBER_PREFIXES + BOILERPLATE_PREFIXES)


def truncate_at_word(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    cut = text[:limit]
    space = cut.rfind(" ")
    if space > limit // 2:
        cut = cut[:space]
    return cut.rstrip(" ,;:-–")


def first_sentence(text: str) -> str:
    for sentence in SENTENCE_END_PATTERN.split(text):
        if sentence.strip():
            return sentence.strip()
    return ""


def extract_right_phrase(text: str) -> Optional[str]:
    """Text following a right-conferring phrase ("entitled to ...", "זכאי ל...")."""
    for pattern in RIGHT_PHRASE_PATTERNS:
        for match in pattern.finditer(text):
            phrase = match.group("phrase").strip(" ,-–")
            if len(phrase) < MIN_PHRASE_TITLE:
                continue
            phrase = truncate_at_word(phrase, MAX_PHRASE_TITLE)
            if len(phrase) < MIN_PHRASE_TITLE:
                continue
            if phrase[0].isascii() and phrase[0].isalpha():
                phrase = phrase[0].upper() + phrase[1:]
            return phrase
    return None


def build_title(chunk: str, heading_title: Optional[str] = None) -> str:
    """Choose a benefit title.

    The enclosing heading wins when it has a sensible length; otherwise a
    title is synthesized from the right-conferring phrase, the first
    sentence, or a truncated prefix.
    """
    if heading_title:
        heading = heading_title.strip().rstrip(":").strip()
        for candidate in (strip_prefixes(heading, CLAUSE_NUMBER_PREFIXES), heading):
            if MIN_HEADING_TITLE <= len(candidate) <= MAX_HEADING_TITLE:
                return candidate

    cleaned = clean_benefit_text(chunk)
    phrase = extract_right_phrase(cleaned)
    if phrase:
        return phrase

    sentence = first_sentence(cleaned)
    if MIN_HEADING_TITLE <= len(sentence) <= MAX_HEADING_TITLE:
        return sentence.rstrip(".")

    prefix = truncate_at_word(cleaned, FALLBACK_TITLE_LENGTH)
    return prefix + ELLIPSIS if len(prefix) < len(cleaned) else prefix


def build_summary(chunk: str, max_length: int = MAX_SUMMARY_LENGTH) -> str:
    """Boilerplate-free summary cut at a sentence or word boundary."""
    cleaned = clean_benefit_text(chunk)
    if len(cleaned) <= max_length:
        return cleaned

    window = cleaned[:max_length]
    period = window.rfind(".")
    if period >= max_length // 2:
        return window[:period + 1]

    return truncate_at_word(cleaned, max_length - len(ELLIPSIS)) + ELLIPSIS
