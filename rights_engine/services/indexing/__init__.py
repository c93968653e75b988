"""Structural indexing of clause references and headings."""

from rights_engine.services.indexing.structural_indexer import (
    StructuralIndexer,
    nearest_clause,
    nearest_heading,
)

__all__ = ["StructuralIndexer", "nearest_clause", "nearest_heading"]
