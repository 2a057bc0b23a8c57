#!/usr/bin/env python3
"""
__init__.py
-----------
Hierarchical tag taxonomy.

Components:
    - normalizer: tag cleaning and naming conventions
    - TaxonomyDefinition: schema loading with default fallback
    - TagValidator: schema validation of tags
    - SimilarityMatcher: near-duplicate scoring
    - AutoTagger: rule and hierarchy-fit suggestions
    - review.TagReviewer: combined review of proposed tags (imported
      from its module; it depends on curator.vault)
"""
from .normalizer import clean, clean_list
from .similarity import SimilarityMatcher
from .definition import TaxonomyDefinition
from .validator import TagValidator
from .autotagger import AutoTagger

__all__ = [
    "clean",
    "clean_list",
    "SimilarityMatcher",
    "TaxonomyDefinition",
    "TagValidator",
    "AutoTagger",
]
