#!/usr/bin/env python3
"""
cli.py
------
Command-line interface for the vault curator.

Command Groups:
    - taxonomy: inspect the loaded tag taxonomy
    - tags: validate, compare, suggest, analyze, find and rename tags

Usage:
    # Taxonomy
    curator taxonomy list
    curator taxonomy info status/draft

    # Tags
    curator tags validate status/draft area
    curator tags similar project --threshold 0.6
    curator tags suggest notes/meeting.md --tag Project_Alpha
    curator tags analyze --json
    curator tags find todo

    # Rename (preview first, then apply)
    curator tags rename todo task
    curator tags rename todo task --apply

Every command reads ``config/curator.yaml`` unless ``--config`` points
elsewhere; ``--vault`` and ``--taxonomy`` override the configured paths.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Tuple

# --- Third-party imports ---
import click

# --- Local imports ---
from curator.core.cli import RenameStats, setup_logger
from curator.core.config import CuratorConfig, load_config
from curator.core.exceptions import CuratorError
from curator.core.logging_manager import CuratorLogger, handle_cli_error
from curator.core.paths import TAXONOMY_PATH


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Configuration file (default: config/curator.yaml)",
)
@click.option("--vault", type=click.Path(file_okay=False), help="Vault root directory")
@click.option("--taxonomy", type=click.Path(dir_okay=False), help="Taxonomy schema file")
@click.option("--log-dir", type=click.Path(), default=None, help="Directory for log files")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[str],
    vault: Optional[str],
    taxonomy: Optional[str],
    log_dir: Optional[str],
    verbose: bool,
) -> None:
    """Vault Curator: tag taxonomy and rename tools."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    try:
        config = load_config(Path(config_path) if config_path else None)
    except CuratorError as e:
        handle_cli_error(ctx, e, "load_config", {"path": config_path})

    if vault:
        config.vault_path = Path(vault).expanduser()
    if taxonomy:
        config.taxonomy_path = Path(taxonomy).expanduser()
    elif config.taxonomy_path is None and TAXONOMY_PATH.exists():
        config.taxonomy_path = TAXONOMY_PATH
    if log_dir:
        config.log_dir = Path(log_dir)

    ctx.obj["config"] = config
    ctx.obj["logger"] = setup_logger(config.log_dir, "curator")


def _load_taxonomy(ctx: click.Context):
    from curator.taxonomy.definition import TaxonomyDefinition

    config: CuratorConfig = ctx.obj["config"]
    taxonomy = TaxonomyDefinition(config.taxonomy_path, ctx.obj["logger"])
    for warning in taxonomy.warnings:
        click.echo(f"⚠️  {warning}", err=True)
    return taxonomy


def _open_vault(ctx: click.Context):
    from curator.vault.documents import MarkdownVault

    config: CuratorConfig = ctx.obj["config"]
    if not config.vault_path.is_dir():
        raise click.ClickException(f"Vault not found: {config.vault_path}")
    return MarkdownVault(
        config.vault_path,
        config.ignore_patterns,
        modified_field=config.modified_field,
        logger=ctx.obj["logger"],
    )


# ═══════════════════════════════════════════════════════════════════════════
# TAXONOMY
# ═══════════════════════════════════════════════════════════════════════════

@cli.group()
def taxonomy() -> None:
    """Inspect the tag taxonomy."""
    pass


@taxonomy.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def taxonomy_list(ctx: click.Context, as_json: bool) -> None:
    """List every tag the taxonomy defines."""
    tax = _load_taxonomy(ctx)
    infos = tax.all_defined_tags()

    if as_json:
        _echo_json({
            "tags": [i.to_dict() for i in infos],
            "newProjectTags": tax.tags_for_new_project(),
            "warnings": tax.warnings,
        })
        return

    source = "built-in default" if tax.using_default else str(ctx.obj["config"].taxonomy_path)
    click.echo(f"📚 Taxonomy ({source}): {len(infos)} tags\n")
    for info in infos:
        flags = "" if info.allow_custom_children else "  [closed]"
        description = f" — {info.description}" if info.description else ""
        click.echo(f"  {info.tag}{description}{flags}")


@taxonomy.command("info")
@click.argument("tag")
@click.pass_context
def taxonomy_info(ctx: click.Context, tag: str) -> None:
    """Show the schema entry for TAG."""
    tax = _load_taxonomy(ctx)
    info = tax.get_tag_info(tag)
    if info is None:
        closest = tax.closest_tag(tag)
        hint = f" (did you mean '{closest.candidate}'?)" if closest else ""
        raise click.ClickException(f"'{tag}' is not defined in the taxonomy{hint}")
    _echo_json(info.to_dict())


# ═══════════════════════════════════════════════════════════════════════════
# TAGS
# ═══════════════════════════════════════════════════════════════════════════

@cli.group()
def tags() -> None:
    """Validate, analyze and rename tags."""
    pass


@tags.command("validate")
@click.argument("tag_list", nargs=-1, required=True)
@click.pass_context
def tags_validate(ctx: click.Context, tag_list: Tuple[str, ...]) -> None:
    """Validate TAG_LIST against the taxonomy."""
    from curator.taxonomy.validator import TagValidator

    tax = _load_taxonomy(ctx)
    validator = TagValidator(tax, ctx.obj["logger"])
    valid, invalid = validator.filter_valid(tag_list)

    for tag in valid:
        click.echo(f"  ✓ {tag}")
    for tag, reason in invalid:
        closest = tax.closest_tag(tag)
        hint = f" (did you mean '{closest.candidate}'?)" if closest else ""
        click.echo(f"  ✗ {tag}: {reason}{hint}")

    if invalid:
        raise click.ClickException(f"{len(invalid)} invalid tag(s)")


@tags.command("similar")
@click.argument("tag")
@click.option("--threshold", type=click.FloatRange(0.0, 1.0), default=None,
              help="Minimum similarity (default: from config)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def tags_similar(
    ctx: click.Context, tag: str, threshold: Optional[float], as_json: bool
) -> None:
    """Find vault and taxonomy tags similar to TAG."""
    from curator.taxonomy.similarity import SimilarityMatcher
    from curator.vault.tags import TagIndex

    config: CuratorConfig = ctx.obj["config"]
    logger: CuratorLogger = ctx.obj["logger"]
    try:
        index = TagIndex.build(_open_vault(ctx), logger)
        pool = index.tags + _load_taxonomy(ctx).defined_tag_names()
        matcher = SimilarityMatcher(config.similarity_threshold)
        matches = matcher.find_similar(tag, pool, threshold)
    except CuratorError as e:
        handle_cli_error(ctx, e, "similar_tags", {"tag": tag})

    if as_json:
        _echo_json([m.to_dict() for m in matches])
        return
    if not matches:
        click.echo(f"No tags similar to '{tag}'")
        return
    for match in matches:
        click.echo(f"  {match.score:5.0%}  {match.candidate}  ({match.kind.value})")


@tags.command("suggest")
@click.argument("note")
@click.option("-t", "--tag", "proposed", multiple=True, help="Proposed tag (repeatable)")
@click.pass_context
def tags_suggest(ctx: click.Context, note: str, proposed: Tuple[str, ...]) -> None:
    """Review the tags of NOTE (vault-relative path) and suggest more."""
    from curator.taxonomy.autotagger import AutoTagger
    from curator.taxonomy.review import TagReviewer
    from curator.taxonomy.similarity import SimilarityMatcher
    from curator.vault.tags import TagIndex

    config: CuratorConfig = ctx.obj["config"]
    logger: CuratorLogger = ctx.obj["logger"]
    try:
        vault = _open_vault(ctx)
        tax = _load_taxonomy(ctx)
        content = vault.read_text(note)
        index = TagIndex.build(vault, logger)
        reviewer = TagReviewer(
            tax,
            known_tags=index.tags,
            matcher=SimilarityMatcher(config.similarity_threshold),
            auto_tagger=AutoTagger(
                tax,
                use_rules=config.auto_tagging,
                use_hierarchy=config.suggest_from_taxonomy,
                logger=logger,
            ),
            suggestion_threshold=config.suggestion_threshold,
            logger=logger,
        )
        result = reviewer.review(content, proposed)
    except CuratorError as e:
        handle_cli_error(ctx, e, "suggest_tags", {"note": note})

    _echo_json(result.to_dict())


@tags.command("analyze")
@click.option("--json", "as_json", is_flag=True, help="Output full analysis as JSON")
@click.option("--top", type=int, default=20, help="Number of tags to list")
@click.pass_context
def tags_analyze(ctx: click.Context, as_json: bool, top: int) -> None:
    """Analyze tag usage across the vault."""
    from curator.taxonomy.similarity import SimilarityMatcher
    from curator.vault.tags import TagIndex

    config: CuratorConfig = ctx.obj["config"]
    matcher = SimilarityMatcher(config.similarity_threshold)
    try:
        index = TagIndex.build(_open_vault(ctx), ctx.obj["logger"])
    except CuratorError as e:
        handle_cli_error(ctx, e, "analyze_tags")

    if as_json:
        _echo_json(index.to_dict(matcher))
        return

    click.echo(f"📊 {len(index.tag_stats)} tags in {index.files_scanned} notes\n")
    for stat in index.stats()[:top]:
        click.echo(f"  {stat.count:4d}  {stat.tag}")

    recommendations = index.recommendations(matcher)
    if recommendations:
        click.echo("\nRecommendations:")
        for rec in recommendations:
            click.echo(f"  • {rec['message']}: {rec['action']}")
    for path, error in index.errors:
        click.echo(f"  ✕ {path} — {error}", err=True)


@tags.command("find")
@click.argument("tag")
@click.pass_context
def tags_find(ctx: click.Context, tag: str) -> None:
    """List notes that use TAG."""
    from curator.vault.tags import find_documents_with_tag

    try:
        hits = find_documents_with_tag(tag, _open_vault(ctx))
    except CuratorError as e:
        handle_cli_error(ctx, e, "find_tag", {"tag": tag})

    if not hits:
        click.echo(f"No notes use '{tag}'")
        return
    for hit in hits:
        where = []
        if hit["frontmatter"]:
            where.append("frontmatter")
        if hit["inline"]:
            where.append(f"{hit['inline']} inline")
        click.echo(f"  {hit['path']}  ({', '.join(where)})")


@tags.command("rename")
@click.argument("old_tag")
@click.argument("new_tag")
@click.option("--apply", is_flag=True, help="Write changes (default: preview only)")
@click.option("--no-inline", is_flag=True, help="Skip inline #tags in note bodies")
@click.option("--no-frontmatter", is_flag=True, help="Skip frontmatter tag lists")
@click.option("--json", "as_json", is_flag=True, help="Output report as JSON")
@click.pass_context
def tags_rename(
    ctx: click.Context,
    old_tag: str,
    new_tag: str,
    apply: bool,
    no_inline: bool,
    no_frontmatter: bool,
    as_json: bool,
) -> None:
    """
    Rename OLD_TAG to NEW_TAG across the vault.

    Runs as a preview unless --apply is given.
    """
    from curator.taxonomy.similarity import SimilarityMatcher
    from curator.vault.rename import RenamePropagator, RenameRequest
    from curator.vault.tags import TagIndex

    config: CuratorConfig = ctx.obj["config"]
    logger: CuratorLogger = ctx.obj["logger"]
    start = datetime.now()

    try:
        vault = _open_vault(ctx)
        request = RenameRequest(
            old_tag,
            new_tag,
            preview=not apply,
            include_inline=not no_inline,
            include_frontmatter=not no_frontmatter,
        )
        known = TagIndex.build(vault, logger).tags
        propagator = RenamePropagator(
            vault, SimilarityMatcher(config.similarity_threshold), logger
        )
        report = propagator.rename_tag(request, known_tags=known)
    except CuratorError as e:
        handle_cli_error(ctx, e, "rename_tag", {"old_tag": old_tag, "new_tag": new_tag})

    if as_json:
        _echo_json(report.to_dict())
    else:
        click.echo(report.summary())
        click.echo(f"\n{RenameStats.from_report(report, start).summary()}")
        if report.preview and report.changes:
            click.echo("Run again with --apply to write these changes.")

    if not report.success:
        raise click.ClickException(f"{len(report.errors)} note(s) could not be updated")


if __name__ == "__main__":
    cli(obj={})
