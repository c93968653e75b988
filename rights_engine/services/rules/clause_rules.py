"""Clause-marker and heading rule tables for bilingual policy wording.

Each ClauseRule pairs a clause type and language with one compiled pattern whose
first group captures the clause number. The tables are built once at import and
never mutated; adding a surface form means adding a row here.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Pattern, Tuple

from rights_engine.models.evidence import ClauseType, Language

# Hebrew ordinal letter ("ב", "ב'") or a plain number, not followed by another letter
# so that "פרק זה" is not read as chapter "ז".
_HE_ORDINAL = r"(\d+|[א-ת]['׳]?)(?![א-ת])"
_HE_NUMBER_PREFIX = r"(?:מס(?:פר|['׳])\s*)?"
_DOTTED = r"(\d+(?:\.\d+)*)"


@dataclass(frozen=True)
class ClauseRule:
    clause_type: ClauseType
    language: Language
    pattern: Pattern[str]


def _rule(clause_type: ClauseType, language: Language, pattern: str) -> ClauseRule:
    return ClauseRule(clause_type, language, re.compile(pattern, re.IGNORECASE))


CLAUSE_RULES: Tuple[ClauseRule, ...] = (
    # Hebrew
    _rule(ClauseType.SECTION, Language.HEBREW, r"סעיף\s+(\d+(?:\.\d+)*[א-ת]?)(?![\dא-ת])"),
    _rule(ClauseType.CLAUSE, Language.HEBREW, r"(?:סעיף\s+קטן|תת[-\s]?סעיף)\s+\(?(\d+(?:\.\d+)*|[א-ת]['׳]?)\)?(?![א-ת])"),
    _rule(ClauseType.CHAPTER, Language.HEBREW, r"פרק\s+" + _HE_ORDINAL),
    _rule(ClauseType.ARTICLE, Language.HEBREW, r"סימן\s+" + _HE_ORDINAL),
    _rule(ClauseType.PARAGRAPH, Language.HEBREW, r"פסקה\s+\(?(\d+|[א-ת]['׳]?)\)?(?![א-ת])"),
    _rule(ClauseType.APPENDIX, Language.HEBREW, r"נספח\s+" + _HE_NUMBER_PREFIX + _HE_ORDINAL),
    _rule(ClauseType.ANNEX, Language.HEBREW, r"תוספת\s+" + _HE_NUMBER_PREFIX + _HE_ORDINAL),
    _rule(ClauseType.EXCLUSION, Language.HEBREW, r"חריג(?:ים)?\s+" + _HE_NUMBER_PREFIX + _DOTTED),
    _rule(ClauseType.DEFINITION, Language.HEBREW, r"הגדר(?:ה|ות)\s+" + _HE_NUMBER_PREFIX + _DOTTED),
    _rule(ClauseType.CONDITION, Language.HEBREW, r"תנאי\s+" + _HE_NUMBER_PREFIX + _DOTTED),
    # English
    _rule(ClauseType.SECTION, Language.ENGLISH, r"(?:\bsection\s+|\bsec\.\s*|§\s*)(\d+(?:\.\d+)*[a-z]?)\b"),
    _rule(ClauseType.CHAPTER, Language.ENGLISH, r"\bchapter\s+(\d+|[IVXLC]+)\b"),
    _rule(ClauseType.CLAUSE, Language.ENGLISH, r"\bclause\s+(\d+(?:\.\d+)*[a-z]?)\b"),
    _rule(ClauseType.ARTICLE, Language.ENGLISH, r"\barticle\s+(\d+|[IVXLC]+)\b"),
    _rule(ClauseType.PARAGRAPH, Language.ENGLISH, r"\bparagraph\s+\(?(\d+|[a-z])\b\)?"),
    _rule(ClauseType.APPENDIX, Language.ENGLISH, r"\bappendix\s+([a-z]|\d+)\b"),
    _rule(ClauseType.ANNEX, Language.ENGLISH, r"\bannex\s+([a-z]|\d+)\b"),
    _rule(ClauseType.EXCLUSION, Language.ENGLISH, r"\bexclusion\s+(?:no\.?\s*)?" + _DOTTED),
    _rule(ClauseType.DEFINITION, Language.ENGLISH, r"\bdefinition\s+(?:no\.?\s*)?" + _DOTTED),
    _rule(ClauseType.CONDITION, Language.ENGLISH, r"\bcondition\s+(?:no\.?\s*)?" + _DOTTED),
)


SECTION_LABELS: Mapping[Tuple[ClauseType, Language], str] = MappingProxyType({
    (ClauseType.SECTION, Language.HEBREW): "סעיף {number}",
    (ClauseType.CLAUSE, Language.HEBREW): "סעיף קטן {number}",
    (ClauseType.CHAPTER, Language.HEBREW): "פרק {number}",
    (ClauseType.ARTICLE, Language.HEBREW): "סימן {number}",
    (ClauseType.PARAGRAPH, Language.HEBREW): "פסקה {number}",
    (ClauseType.APPENDIX, Language.HEBREW): "נספח {number}",
    (ClauseType.ANNEX, Language.HEBREW): "תוספת {number}",
    (ClauseType.EXCLUSION, Language.HEBREW): "חריג {number}",
    (ClauseType.DEFINITION, Language.HEBREW): "הגדרה {number}",
    (ClauseType.CONDITION, Language.HEBREW): "תנאי {number}",
    (ClauseType.SECTION, Language.ENGLISH): "Section {number}",
    (ClauseType.CLAUSE, Language.ENGLISH): "Clause {number}",
    (ClauseType.CHAPTER, Language.ENGLISH): "Chapter {number}",
    (ClauseType.ARTICLE, Language.ENGLISH): "Article {number}",
    (ClauseType.PARAGRAPH, Language.ENGLISH): "Paragraph {number}",
    (ClauseType.APPENDIX, Language.ENGLISH): "Appendix {number}",
    (ClauseType.ANNEX, Language.ENGLISH): "Annex {number}",
    (ClauseType.EXCLUSION, Language.ENGLISH): "Exclusion {number}",
    (ClauseType.DEFINITION, Language.ENGLISH): "Definition {number}",
    (ClauseType.CONDITION, Language.ENGLISH): "Condition {number}",
})


# Words that open a Hebrew section title ("כיסויים", "חריגים", ...).
HEBREW_TOPIC_WORDS: Tuple[str, ...] = (
    "כיסוי",
    "כיסויים",
    "הגדרות",
    "חריגים",
    "סייגים",
    "תנאים",
    "תנאי הפוליסה",
    "הרחבה",
    "הרחבות",
    "נספח",
    "שירותים",
    "פרק",
    "תגמולי ביטוח",
    "היקף הכיסוי",
    "מטרת הביטוח",
    "תקופת הביטוח",
)

HEADING_PATTERNS: Dict[str, Pattern[str]] = {
    "caps": re.compile(r"^[A-Z][A-Z0-9 &/,'()\-]+$"),
    "numbered": re.compile(
        r"^(?:\d+(?:\.\d+)*[.)]|\(?[א-ת]['׳]?[.)]|\(?[a-zA-Z][.)])\s+\S"
    ),
}

# Display names that mark a document as a supplement to the base policy.
ANNEX_NAME_PATTERN: Pattern[str] = re.compile(
    r"\b(?:annex|appendix|schedule|rider|endorsement|addendum)\b|נספח|הרחבה|תוספת|כתב שירות",
    re.IGNORECASE,
)

# Annex labels inside the text, e.g. "נספח א' - שירותי רפואה" or "Rider B".
ANNEX_LABEL_PATTERN: Pattern[str] = re.compile(
    r"(?:נספח|תוספת|כתב שירות)\s+[^\n.:,;]{1,40}"
    r"|\b(?:annex|appendix|rider|endorsement)\s+[A-Z0-9][^\n.:,;]{0,40}",
    re.IGNORECASE,
)
