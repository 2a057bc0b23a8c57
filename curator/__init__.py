"""
Vault Curator
=============

Tag taxonomy management and rename propagation for markdown vaults.

Notes carry hierarchical tags (``status/draft``, ``project/alpha``) in
their YAML frontmatter and inline as ``#tags``. This package validates
those tags against a schema, detects near-duplicates, suggests tags for
new content, and renames tags across every note safely.

Main Components:
    - taxonomy: schema loading, validation, similarity, auto-tagging, review
    - vault: document access, tag extraction/analysis, rename propagation
    - core: logging, exceptions, configuration, paths
    - utils: frontmatter and filesystem helpers

Primary Interfaces:
    - curator.cli: ``curator`` command-line interface
    - curator.taxonomy.TaxonomyDefinition / TagValidator
    - curator.vault.RenamePropagator

Example Usage:
    >>> from curator.taxonomy import TaxonomyDefinition, TagValidator
    >>> validator = TagValidator(TaxonomyDefinition())
    >>> validator.is_valid("status/draft")
    True
"""
__version__ = "0.3.0"
