# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 Ozeki contributors
"""
Ozeki CLI

Command-line interface for reading-assessment scoring.

Commands:
    reading classify      Composite average and reading level per learner
    reading distribution  Reading-level distribution for a cohort
    reading movement      Baseline to endline level movement
    reading report        Full reading levels block for every cycle
    version               Show version and classification ruleset
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import click
import toml

from ozeki import __version__
from ozeki.reading.loader import InputFileError, load_records
from ozeki.reading.scoring import RULE_VERSION


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
logger = logging.getLogger('ozeki')

READING_DEFAULTS = {
    'top_transitions': 5,
    'id_field': 'childId',
    'cycle_field': 'assessmentType',
    'warn_on_clamp': True,
}


def load_config(config_path: Path) -> dict[str, Any]:
    """Load TOML configuration file."""
    if not config_path.exists():
        raise click.ClickException(f"Config file not found: {config_path}")

    with open(config_path) as f:
        return toml.load(f)


def resolve_config_path() -> str:
    """Find config file: user path first, then system path."""
    user_config = Path.home() / '.config' / 'ozeki' / 'ozeki.toml'
    system_config = Path('/etc/ozeki/ozeki.toml')
    if user_config.exists():
        return str(user_config)
    if system_config.exists():
        return str(system_config)
    return str(user_config)  # Default to user path even if missing


def get_reading_config(config: dict[str, Any]) -> dict[str, Any]:
    """[reading] section merged over the defaults."""
    section = config.get('reading', {}) or {}
    merged = dict(READING_DEFAULTS)
    merged.update({k: v for k, v in section.items() if k in READING_DEFAULTS})

    # TOML has real booleans; quoted strings are rejected.
    if not isinstance(merged['warn_on_clamp'], bool):
        raise click.ClickException(
            f"[reading] warn_on_clamp must be true or false, "
            f"got {merged['warn_on_clamp']!r}")
    top = merged['top_transitions']
    if isinstance(top, bool) or not isinstance(top, int) or top < 0:
        raise click.ClickException(
            f"[reading] top_transitions must be a non-negative integer, got {top!r}")
    return merged


@click.group()
@click.option('-c', '--config', 'config_path',
              type=click.Path(),
              default=None,
              help='Path to config file')
@click.option('-v', '--verbose', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx: click.Context, config_path: str, verbose: bool) -> None:
    """Ozeki - reading assessment scoring.

    Classifies learners into reading levels and reports cohort
    distributions and baseline to endline movement.
    """
    ctx.ensure_object(dict)

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    explicit = config_path is not None
    if config_path is None:
        config_path = resolve_config_path()
    config_file = Path(config_path)

    ctx.obj['config'] = {}
    ctx.obj['config_path'] = None
    if config_file.exists():
        try:
            ctx.obj['config'] = load_config(config_file)
            ctx.obj['config_path'] = config_path
        except (OSError, toml.TomlDecodeError) as e:
            logger.warning(f"Ignoring unreadable config {config_file}: {e}")
    elif explicit:
        raise click.ClickException(f"Config file not found: {config_file}")

    reading = get_reading_config(ctx.obj['config'])
    ctx.obj['reading'] = reading
    if not reading['warn_on_clamp']:
        logging.getLogger('ozeki.reading.scoring').setLevel(logging.ERROR)


def _reading_settings(ctx: click.Context) -> dict[str, Any]:
    obj = ctx.obj or {}
    return obj.get('reading') or dict(READING_DEFAULTS)


def _load(path: str) -> list[dict[str, Any]]:
    try:
        return load_records(path)
    except InputFileError as e:
        raise click.ClickException(str(e))


@cli.command()
@click.pass_context
def version(ctx: click.Context) -> None:
    """Show version information."""
    click.echo(f"Ozeki v{__version__}")
    click.echo(f"Reading level rules: {RULE_VERSION}")


# =============================================================================
# READING COMMANDS
# =============================================================================

@cli.group()
def reading():
    """Ozeki Reading — reading levels from assessment scores.

    Each command reads a JSON export of assessment records: either a list
    of records or an object with a "records" list.
    """
    pass


@reading.command('classify')
@click.argument('records_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--cycle', default=None, help='Only records from this cycle (e.g. baseline)')
@click.option('--json', 'output_json', is_flag=True, help='Output as JSON')
@click.pass_context
def reading_classify(ctx, records_file, cycle, output_json):
    """Show composite average and reading level for each learner.

    Examples:
        ozeki reading classify assessments.json
        ozeki reading classify assessments.json --cycle endline --json
    """
    from ozeki.reading.records import extract_domain_scores, filter_cycle
    from ozeki.reading.report import format_json, format_learners
    from ozeki.reading.scoring import assess_learner

    settings = _reading_settings(ctx)
    records = _load(records_file)
    if cycle:
        records = filter_cycle(records, cycle, settings['cycle_field'])

    results = []
    skipped = 0
    for index, record in enumerate(records, start=1):
        scores = extract_domain_scores(record)
        if scores is None:
            skipped += 1
            continue
        learner_id = record.get(settings['id_field'])
        label = str(learner_id) if learner_id is not None else f"#{index}"
        results.append((label, assess_learner(scores)))

    if not results:
        click.echo("No assessed learners found.", err=True)
        click.echo("\nHint: records need at least one domain score, "
                   "e.g. letterIdentificationScore.", err=True)
        raise SystemExit(1)

    if output_json:
        click.echo(format_json({
            "rule_version": RULE_VERSION,
            "skipped": skipped,
            "learners": [dict(result.to_dict(), id=label) for label, result in results],
        }))
    else:
        click.echo(format_learners(results))
        if skipped:
            click.echo(f"  {skipped} record(s) without assessment data skipped.")


@reading.command('distribution')
@click.argument('records_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--cycle', default=None, help='Only records from this cycle (e.g. baseline)')
@click.option('--json', 'output_json', is_flag=True, help='Output as JSON')
@click.pass_context
def reading_distribution(ctx, records_file, cycle, output_json):
    """Reading-level distribution across a cohort.

    Examples:
        ozeki reading distribution assessments.json
        ozeki reading distribution assessments.json --cycle baseline
    """
    from ozeki.reading.cohort import average_domain_scores, reading_level_distribution
    from ozeki.reading.records import extract_cohort, filter_cycle
    from ozeki.reading.report import format_distribution, format_json

    settings = _reading_settings(ctx)
    records = _load(records_file)
    if cycle:
        records = filter_cycle(records, cycle, settings['cycle_field'])

    cohort, skipped = extract_cohort(records)
    dist = reading_level_distribution(cohort)

    if output_json:
        result = dist.to_dict()
        result["cycle"] = cycle
        result["skipped"] = skipped
        result["domain_averages"] = average_domain_scores(cohort).as_dict()
        click.echo(format_json(result))
    else:
        title = f"{cycle.capitalize()} distribution" if cycle else "Reading Levels"
        click.echo(format_distribution(dist, title=title))


@reading.command('movement')
@click.argument('records_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--baseline', 'baseline_cycle', default='baseline', help='Baseline cycle name')
@click.option('--endline', 'endline_cycle', default='endline', help='Endline cycle name')
@click.option('--top', type=int, default=None, help='Number of top transitions (default: 5)')
@click.option('--json', 'output_json', is_flag=True, help='Output as JSON')
@click.pass_context
def reading_movement(ctx, records_file, baseline_cycle, endline_cycle, top, output_json):
    """Reading-level movement for learners assessed in both cycles.

    Learners are matched on the learner id field (childId by default,
    configurable as reading.id_field in ozeki.toml).

    Examples:
        ozeki reading movement assessments.json
        ozeki reading movement assessments.json --endline midline --top 3
    """
    from ozeki.reading.movement import reading_level_movement
    from ozeki.reading.records import index_by_learner
    from ozeki.reading.report import format_json, format_movement

    settings = _reading_settings(ctx)
    records = _load(records_file)
    limit = top if top is not None else settings['top_transitions']

    baseline = index_by_learner(records, settings['id_field'],
                                cycle=baseline_cycle, cycle_field=settings['cycle_field'])
    endline = index_by_learner(records, settings['id_field'],
                               cycle=endline_cycle, cycle_field=settings['cycle_field'])

    movement = reading_level_movement(baseline, endline, limit=limit)
    if movement is None:
        click.echo(f"No learners assessed in both '{baseline_cycle}' and "
                   f"'{endline_cycle}'.", err=True)
        click.echo(f"\nHint: learners are matched on '{settings['id_field']}'.", err=True)
        raise SystemExit(1)

    if output_json:
        click.echo(format_json(movement.to_dict()))
    else:
        click.echo(format_movement(movement))


@reading.command('report')
@click.argument('records_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--baseline', 'baseline_cycle', default='baseline', help='Baseline cycle name')
@click.option('--endline', 'endline_cycle', default='endline', help='Endline cycle name')
@click.option('--top', type=int, default=None, help='Number of top transitions (default: 5)')
@click.option('--json', 'output_json', is_flag=True, help='Output as JSON')
@click.pass_context
def reading_report(ctx, records_file, baseline_cycle, endline_cycle, top, output_json):
    """Reading levels profile for every cycle, plus movement.

    Examples:
        ozeki reading report assessments.json
        ozeki reading report assessments.json --json
    """
    from ozeki.reading.records import (
        extract_cohort,
        filter_cycle,
        index_by_learner,
        record_cycle,
    )
    from ozeki.reading.report import build_reading_levels_block, format_block, format_json

    settings = _reading_settings(ctx)
    cycle_field = settings['cycle_field']
    records = _load(records_file)
    limit = top if top is not None else settings['top_transitions']

    names = []
    for record in records:
        name = record_cycle(record, cycle_field)
        if name and name not in names:
            names.append(name)

    if names:
        cycles = {name: extract_cohort(filter_cycle(records, name, cycle_field))[0]
                  for name in names}
    else:
        cycles = {"all": extract_cohort(records)[0]}

    if not any(cycles.values()):
        click.echo("No assessed learners found.", err=True)
        raise SystemExit(1)

    baseline = index_by_learner(records, settings['id_field'],
                                cycle=baseline_cycle, cycle_field=cycle_field)
    endline = index_by_learner(records, settings['id_field'],
                               cycle=endline_cycle, cycle_field=cycle_field)
    block = build_reading_levels_block(cycles, baseline, endline, limit=limit)

    if output_json:
        click.echo(format_json(block.to_dict()))
    else:
        click.echo(format_block(block))


def main() -> None:
    """Entry point for CLI."""
    cli(obj={})


if __name__ == '__main__':
    main()
