"""CLI for the pulsescore scoring pipeline."""

import json
import logging

import click

from pulsescore.analytics.config import ScoringConfig
from pulsescore.records import RecordValidationError


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config(config_path: str | None, max_hr: float | None) -> ScoringConfig:
    data = {}
    if config_path:
        with open(config_path) as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise click.ClickException(f"{config_path}: {e}") from e
        if not isinstance(data, dict):
            raise click.ClickException(f"{config_path}: config must be a JSON object")
    if max_hr is not None:
        data["max_hr"] = max_hr
    try:
        return ScoringConfig.from_mapping(data)
    except ValueError as e:
        raise click.ClickException(str(e)) from e


def _run(directory: str, config: ScoringConfig, skip_invalid: bool):
    from pulsescore.analytics.pipeline import score_records
    from pulsescore.loader import load_directory

    try:
        data = load_directory(directory, skip_invalid=skip_invalid)
    except RecordValidationError as e:
        raise click.ClickException(str(e)) from e

    return score_records(
        data.heart_rate,
        data.sleep,
        data.sleep_minutes,
        data.activity_minutes,
        config,
    )


def _emit(text: str, output: str | None) -> None:
    if output:
        with open(output, "w") as out:
            out.write(text + "\n")
        click.echo(f"Output written to {output}")
    else:
        click.echo(text)


def _common_options(f):
    f = click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")(f)
    f = click.option("--skip-invalid", is_flag=True, help="Skip rows that fail validation.")(f)
    f = click.option("--output", "-o", default=None, help="Write JSON to this file.")(f)
    f = click.option("--config", "config_path", type=click.Path(exists=True), default=None,
                     help="JSON file overriding scoring thresholds.")(f)
    f = click.option("--max-hr", default=None, type=float, help="Max heart rate (default 190).")(f)
    f = click.argument("directory", type=click.Path(exists=True, file_okay=False))(f)
    return f


@click.group()
def main() -> None:
    """pulsescore: derive strain, recovery and sleep scores from wearable exports."""


@main.command()
@_common_options
def score(
    directory: str,
    max_hr: float | None,
    config_path: str | None,
    output: str | None,
    skip_invalid: bool,
    verbose: bool,
) -> None:
    """Score every day in an export directory and print the report."""
    _setup_logging(verbose)
    config = _load_config(config_path, max_hr)
    _index, report = _run(directory, config, skip_invalid)
    _emit(report.to_json(), output)


@main.command()
@_common_options
@click.option("--today", default=None, help="Day to summarise (YYYY-MM-DD); defaults to the latest data.")
def summary(
    directory: str,
    max_hr: float | None,
    config_path: str | None,
    output: str | None,
    skip_invalid: bool,
    verbose: bool,
    today: str | None,
) -> None:
    """Print the today snapshot: scores, sleep need, coach and 7-day averages."""
    from datetime import date

    from pulsescore.analytics.summary import build_today

    _setup_logging(verbose)
    if today is not None:
        try:
            date.fromisoformat(today)
        except ValueError:
            raise click.BadParameter(f"invalid date {today!r}", param_hint="--today")

    config = _load_config(config_path, max_hr)
    index, report = _run(directory, config, skip_invalid)
    snapshot = build_today(report, index, today=today, config=config)
    _emit(snapshot.to_json(), output)


if __name__ == "__main__":
    main()
