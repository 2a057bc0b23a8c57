#!/usr/bin/env python3
"""
__init__.py
-----------
Vault access and vault-wide tag operations.

Components:
    - DocumentSet / MarkdownVault: document access contract and its
      filesystem implementation
    - RenamePropagator: tag rename across every note
    - TagIndex: tag usage analysis
"""
from .documents import DocumentSet, FrontmatterDocuments, MarkdownVault
from .rename import RenamePropagator, RenameReport, RenameRequest, build_tag_pattern
from .tags import TagIndex, find_documents_with_tag, update_note_tags

__all__ = [
    "DocumentSet",
    "FrontmatterDocuments",
    "MarkdownVault",
    "RenamePropagator",
    "RenameReport",
    "RenameRequest",
    "build_tag_pattern",
    "TagIndex",
    "find_documents_with_tag",
    "update_note_tags",
]
