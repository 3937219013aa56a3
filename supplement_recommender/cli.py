"""
Supplement Recommender - CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load the catalog and / or the user snapshot.
  4. Execute action (score, grade completeness, fingerprint).
  5. Report result to stdout.

Install and run::

    pip install -e .
    supplement-recommender --help
    supplement-recommender validate-config
    supplement-recommender validate-catalog
    supplement-recommender recommend --user-id demo-user
    supplement-recommender recommend --user-id demo-user --snapshot snapshot.json --json
    supplement-recommender completeness --user-id demo-user
    supplement-recommender fingerprint --user-id demo-user
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="supplement-recommender",
    help="Rule-based supplement recommendations from aggregated user data.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from supplement_recommender.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from supplement_recommender.utils.logging import configure_logging
    configure_logging(config.logging)


def _load_catalog_or_exit(config, catalog_file: Optional[str]):
    """Load the catalog from ``--catalog`` or ``config.data.catalog_file``."""
    from supplement_recommender.catalog.loader import load_catalog
    from supplement_recommender.errors import CatalogValidationError

    path = Path(catalog_file) if catalog_file else Path(config.data.catalog_file)
    try:
        return load_catalog(path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except CatalogValidationError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        for idx, msg in exc.errors[3:]:
            typer.echo(f"  Entry #{idx}: {msg}", err=True)
        raise typer.Exit(code=1)


def _build_source(config, data_dir: Optional[str], use_rest: bool):
    """Pick the user-data source: REST API or per-user JSON directory."""
    from supplement_recommender.aggregation.sources import (
        JsonDirectorySource,
        RestUserDataSource,
    )

    if use_rest:
        if not config.source.base_url:
            typer.echo(
                "[ERROR] --rest needs source.base_url "
                "(or SUPPLEMENT_RECOMMENDER_SOURCE_URL).",
                err=True,
            )
            raise typer.Exit(code=1)
        return RestUserDataSource(
            config.source.base_url,
            api_key=config.source.api_key,
            timeout=config.source.timeout_seconds,
            max_concurrency=config.source.max_concurrency,
        )
    return JsonDirectorySource(Path(data_dir or config.data.user_data_dir))


def _load_snapshot_or_exit(
    config,
    user_id: str,
    snapshot_file: Optional[str],
    data_dir: Optional[str],
    use_rest: bool,
):
    """Return the user's snapshot from ``--snapshot`` or by aggregating a source."""
    from pydantic import ValidationError

    from supplement_recommender.aggregation.aggregator import aggregate_user_data_sync
    from supplement_recommender.aggregation.sources import load_snapshot_file

    if snapshot_file:
        try:
            return load_snapshot_file(Path(snapshot_file))
        except FileNotFoundError as exc:
            typer.echo(f"[ERROR] {exc}", err=True)
            raise typer.Exit(code=1)
        except ValidationError as exc:
            typer.echo(f"[ERROR] Invalid snapshot file: {exc}", err=True)
            raise typer.Exit(code=1)

    source = _build_source(config, data_dir, use_rest)
    return aggregate_user_data_sync(
        source, user_id, average_days=config.scoring.average_window_days
    )


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Catalog file:     {config.data.catalog_file}")
    typer.echo(f"  User data dir:    {config.data.user_data_dir}")
    typer.echo(f"  Min score:        {config.scoring.min_score_threshold}")
    typer.echo(f"  Max results:      {config.scoring.max_recommendations}")
    typer.echo(f"  Average window:   {config.scoring.average_window_days}d")
    typer.echo(f"  REST source:      {config.source.base_url or '(not configured)'}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("validate-catalog")
def validate_catalog(
    catalog_file: Optional[str] = typer.Option(
        None,
        "--catalog",
        help="Path to catalog JSON. Defaults to config.data.catalog_file.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Validate a supplement catalog and list its entries.

    Exits with code 1 if any entry fails validation or an id repeats.
    Unsupported operators are reported as warnings, not errors.
    """
    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    catalog = _load_catalog_or_exit(config, catalog_file)

    typer.echo(f"  Validated {len(catalog)} catalog entr{'y' if len(catalog) == 1 else 'ies'}.")
    for c in catalog:
        unsupported = len(c.unsupported_conditions())
        flag = f" | {unsupported} unsupported condition(s)" if unsupported else ""
        typer.echo(
            f"  {c.id} | {c.substance_class.value} | "
            f"+{len(c.positive_conditions)}/-{len(c.negative_conditions)}"
            f"{' | essential' if c.is_essential else ''}{flag}"
        )
    typer.echo("[OK] Catalog valid.")


@app.command("recommend")
def recommend(
    user_id: str = typer.Option(
        ...,
        "--user-id",
        "-u",
        help="User to score the catalog for.",
    ),
    data_dir: Optional[str] = typer.Option(
        None,
        "--data-dir",
        help="Per-user JSON directory. Defaults to config.data.user_data_dir.",
    ),
    snapshot_file: Optional[str] = typer.Option(
        None,
        "--snapshot",
        help="Pre-aggregated snapshot JSON; skips aggregation.",
    ),
    use_rest: bool = typer.Option(
        False,
        "--rest",
        help="Aggregate from the REST source in config [source].",
    ),
    catalog_file: Optional[str] = typer.Option(
        None,
        "--catalog",
        help="Path to catalog JSON. Defaults to config.data.catalog_file.",
    ),
    output_dir: Optional[str] = typer.Option(
        None,
        "--output-dir",
        help="Write the JSON report to this directory.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the full result as JSON instead of a table.",
    ),
    explain: bool = typer.Option(
        False,
        "--explain",
        help="Print a per-supplement explanation below the table.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Score the catalog against one user's data and print the ranking.

    \b
    Data comes from exactly one of:
      --snapshot FILE   pre-aggregated AggregatedUserData JSON
      --rest            REST API configured in [source]
      --data-dir DIR    per-user JSON files (default: config.data.user_data_dir)
    """
    from supplement_recommender.errors import RecommendationConfigError
    from supplement_recommender.pipeline.recommend import RecommendationRunner
    from supplement_recommender.recommendations.reporter import result_to_payload
    from supplement_recommender.reporting.formatters import (
        format_recommendation_explanation,
        format_result_table,
    )

    if snapshot_file and use_rest:
        typer.echo("[ERROR] Use either --snapshot or --rest, not both.", err=True)
        raise typer.Exit(code=1)

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    catalog = _load_catalog_or_exit(config, catalog_file)
    data = _load_snapshot_or_exit(config, user_id, snapshot_file, data_dir, use_rest)

    runner = RecommendationRunner(config)
    try:
        result = runner.run_from_snapshot(
            user_id,
            data,
            catalog,
            output_dir=Path(output_dir) if output_dir else None,
        )
    except RecommendationConfigError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(result_to_payload(result), indent=2, default=str))
        return

    typer.echo(format_result_table(result))
    if explain:
        for rec in result.recommendations:
            typer.echo("")
            typer.echo(f"--- {rec.supplement.name} ---")
            typer.echo(format_recommendation_explanation(rec))
    typer.echo("")
    typer.echo(f"[OK] {len(result.recommendations)} recommendation(s).")


@app.command("completeness")
def completeness(
    user_id: str = typer.Option(..., "--user-id", "-u", help="User to grade."),
    data_dir: Optional[str] = typer.Option(
        None,
        "--data-dir",
        help="Per-user JSON directory. Defaults to config.data.user_data_dir.",
    ),
    snapshot_file: Optional[str] = typer.Option(
        None,
        "--snapshot",
        help="Pre-aggregated snapshot JSON; skips aggregation.",
    ),
    use_rest: bool = typer.Option(
        False,
        "--rest",
        help="Aggregate from the REST source in config [source].",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Print how complete a user's data is, per category."""
    from supplement_recommender.recommendations.completeness import analyze_completeness
    from supplement_recommender.reporting.formatters import format_completeness

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    data = _load_snapshot_or_exit(config, user_id, snapshot_file, data_dir, use_rest)
    report = analyze_completeness(data, min_data_points=config.scoring.min_data_points)

    typer.echo(format_completeness(report))


@app.command("fingerprint")
def fingerprint(
    user_id: str = typer.Option(..., "--user-id", "-u", help="User to fingerprint."),
    data_dir: Optional[str] = typer.Option(
        None,
        "--data-dir",
        help="Per-user JSON directory. Defaults to config.data.user_data_dir.",
    ),
    snapshot_file: Optional[str] = typer.Option(
        None,
        "--snapshot",
        help="Pre-aggregated snapshot JSON; skips aggregation.",
    ),
    use_rest: bool = typer.Option(
        False,
        "--rest",
        help="Aggregate from the REST source in config [source].",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Print the snapshot fingerprint used for cache invalidation."""
    from supplement_recommender.recommendations.fingerprint import (
        compute_snapshot_fingerprint,
    )

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    data = _load_snapshot_or_exit(config, user_id, snapshot_file, data_dir, use_rest)
    typer.echo(compute_snapshot_fingerprint(data))


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
