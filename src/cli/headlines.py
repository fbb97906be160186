"""CLI commands for the headlines curation system."""

import json
import sys
import uuid
from pathlib import Path

import click
import structlog

from src.config.loader import ConfigLoader, ConfigValidationError
from src.headlines.service import create_headlines_service
from src.headlines.source import JsonFileCandidateSource
from src.observability.logging import (
    bind_run_context,
    configure_logging,
    configure_logging_from_settings,
)
from src.settings import get_settings


logger = structlog.get_logger()

COMPONENT_CLI = "cli"


def _echo_validation_errors(loader: ConfigLoader) -> None:
    click.echo("Configuration validation failed:", err=True)
    for error in loader.validation_errors:
        location = error["loc"] or "<root>"
        click.echo(f"  - {location}: {error['msg']}", err=True)


@click.group()
@click.version_option(version="0.1.0")
def cli() -> None:
    """Market headlines curation CLI."""


@cli.command()
@click.option(
    "--candidates",
    "candidates_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a JSON file holding an array of candidate articles.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to headlines.yaml (default: HEADLINES_CONFIG_PATH or built-ins).",
)
@click.option(
    "--no-llm",
    "no_llm",
    is_flag=True,
    default=False,
    help="Skip the model and always use the deterministic fallback.",
)
@click.option(
    "--json-logs/--console-logs",
    default=None,
    help="Log format (default: HEADLINES_LOG_JSON).",
)
def select(
    candidates_path: Path,
    config_path: Path | None,
    no_llm: bool,
    json_logs: bool | None,
) -> None:
    """Select the top market headlines from a candidate file.

    Prints the pipeline result as JSON on stdout. Logs go to stderr.
    """
    settings = get_settings()
    run_id = str(uuid.uuid4())
    configure_logging_from_settings(settings, json_format=json_logs)
    bind_run_context(run_id, command="select")
    log = logger.bind(component=COMPONENT_CLI, run_id=run_id)

    loader = ConfigLoader(run_id=run_id)
    try:
        config = loader.load(config_path or settings.config_path)
    except ConfigValidationError:
        _echo_validation_errors(loader)
        sys.exit(1)

    log.info(
        "headlines_select_started",
        candidates_path=str(candidates_path),
        config_checksum=loader.checksum,
        llm_requested=not no_llm,
    )

    service = create_headlines_service(
        JsonFileCandidateSource(candidates_path),
        config,
        settings,
        use_llm=not no_llm,
    )
    result = service.get_headlines()

    log.info(
        "headlines_select_complete",
        status=result.status.value,
        headlines=len(result.headlines),
        fallback_used=result.metadata.fallback_used,
    )
    click.echo(json.dumps(result.model_dump(mode="json"), indent=2))


@cli.command("validate-config")
@click.argument(
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
)
def validate_config(config_path: Path) -> None:
    """Validate a headlines.yaml file without running the pipeline."""
    run_id = str(uuid.uuid4())
    configure_logging(json_format=False)
    bind_run_context(run_id, command="validate-config")

    loader = ConfigLoader(run_id=run_id)

    try:
        config = loader.load(config_path)
    except ConfigValidationError:
        _echo_validation_errors(loader)
        sys.exit(1)

    click.echo("Configuration is valid!")
    click.echo(f"  Credibility sources: {len(config.source_credibility)}")
    click.echo(f"  Macro keywords: {len(config.macro_keywords)}")
    click.echo(f"  Topic rules: {len(config.topic_rules)}")
    click.echo(f"  Shortlist size: {config.selection.shortlist_size}")
    click.echo(f"  Cache freshness: {config.cache.freshness_minutes} minutes")
    click.echo(f"  Checksum: {loader.checksum}")


if __name__ == "__main__":
    cli()
