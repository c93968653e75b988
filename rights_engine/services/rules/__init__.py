"""Declarative rule tables shared by the indexing, evidence and extraction services."""

from rights_engine.services.rules.clause_rules import (
    ANNEX_LABEL_PATTERN,
    ANNEX_NAME_PATTERN,
    CLAUSE_RULES,
    HEADING_PATTERNS,
    HEBREW_TOPIC_WORDS,
    SECTION_LABELS,
    ClauseRule,
)
from rights_engine.services.rules.keyword_rules import (
    KEYWORD_RULES,
    NUMERIC_CURRENCY_PATTERN,
    TOPIC_RULES,
    KeywordCategory,
    KeywordRule,
    TopicRule,
    find_terms,
    has_keyword,
    match_topics,
    matching_rules,
)

__all__ = [
    "ANNEX_LABEL_PATTERN",
    "ANNEX_NAME_PATTERN",
    "CLAUSE_RULES",
    "HEADING_PATTERNS",
    "HEBREW_TOPIC_WORDS",
    "KEYWORD_RULES",
    "NUMERIC_CURRENCY_PATTERN",
    "SECTION_LABELS",
    "TOPIC_RULES",
    "ClauseRule",
    "KeywordCategory",
    "KeywordRule",
    "TopicRule",
    "find_terms",
    "has_keyword",
    "match_topics",
    "matching_rules",
]
