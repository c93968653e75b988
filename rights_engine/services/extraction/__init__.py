"""Benefit harvesting from policy text.

Modules:
- text_utils: segmentation, dedup keys, titles and summaries
- amount_extractor: schedule-gated monetary amount parsing
- benefit_classifier: layer/status classification, tags, eligibility, steps
- benefit_harvester: per-document harvesting into Benefit records
"""

from rights_engine.services.extraction.benefit_harvester import (
    BenefitHarvester,
    HarvestResult,
    resolve_page,
)

__all__ = ["BenefitHarvester", "HarvestResult", "resolve_page"]
