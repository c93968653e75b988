"""Evidence-grounded benefit extraction for bilingual insurance policies."""

__version__ = "0.1.0"
