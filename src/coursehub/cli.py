"""CLI entry point for CourseHub.

Commands:
- serve: run the REST API with the background registration queue runner
- search: search the course catalog
- generate: build a schedule for a list of course codes
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from coursehub.catalog import CatalogError, format_clock, load_catalog
from coursehub.config import ConfigError, load_settings
from coursehub.logging import setup_logging
from coursehub.planner import (
    FREE_PRESETS,
    HttpScheduleProposer,
    PlannerError,
    ScheduleAssembler,
    ScheduleRequest,
)
from coursehub.services import build_proposer

PRESET_IDS = [preset.id for preset in FREE_PRESETS]
UVICORN_LOGGERS = ("uvicorn", "uvicorn.access")


@click.group()
@click.version_option(package_name="coursehub")
def main() -> None:
    """CourseHub - build course schedules and queue registrations."""
    pass


@main.command()
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Path to a coursehub.yaml settings file",
)
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address")
@click.option("--port", default=8000, show_default=True, type=int, help="Bind port")
@click.option("--log-dir", default=None, help="Log directory (overrides the log_dir setting)")
def serve(config_path: Path | None, host: str, port: int, log_dir: str | None) -> None:
    """Run the REST API server."""
    import uvicorn  # noqa: PLC0415

    from coursehub.api.app import create_app  # noqa: PLC0415

    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    setup_logging(
        log_dir or settings.log_dir, settings.log_level, extra_loggers=UVICORN_LOGGERS
    )
    click.echo(f"Serving CourseHub API on http://{host}:{port}/api/v1")
    uvicorn.run(create_app(settings), host=host, port=port, log_config=None)


@main.command()
@click.argument("query", default="")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Path to a coursehub.yaml settings file",
)
def search(query: str, config_path: Path | None) -> None:
    """Search the course catalog by code or name."""
    try:
        catalog = load_catalog(load_settings(config_path).catalog_path)
    except (ConfigError, CatalogError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    results = catalog.search(query)
    if not results:
        click.echo("No courses found.")
        return
    for course in results:
        open_sections = len(course.available_sections)
        click.echo(
            f"{course.code:<12} {course.name} ({course.credits} cr, "
            f"{open_sections}/{len(course.sections)} sections open)"
        )


@main.command()
@click.argument("codes", nargs=-1, required=True)
@click.option(
    "--preset",
    "preset_id",
    type=click.Choice(PRESET_IDS),
    default=None,
    help="Preference preset (default: balanced preferences)",
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Path to a coursehub.yaml settings file",
)
def generate(codes: tuple[str, ...], preset_id: str | None, config_path: Path | None) -> None:
    """Generate a schedule for the given course CODES.

    Prerequisites are added automatically. Quote codes that contain spaces,
    e.g. "CMPSC 132".
    """
    try:
        settings = load_settings(config_path)
        catalog = load_catalog(settings.catalog_path)
    except (ConfigError, CatalogError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    proposer = build_proposer(settings)
    assembler = ScheduleAssembler(catalog, proposer=proposer)
    try:
        schedule = assembler.generate(ScheduleRequest(courses=codes, preset_id=preset_id))
    except PlannerError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    finally:
        if isinstance(proposer, HttpScheduleProposer):
            proposer.close()

    click.echo(f"Schedule {schedule.id}  score {schedule.score}/100  {schedule.total_credits} cr")
    if schedule.used_fallback:
        click.echo("  (proposer unavailable, first open sections used)")
    for section in schedule.sections:
        meetings = ", ".join(
            f"{m.day.value[:3]} {format_clock(m.start)}-{format_clock(m.end)}"
            for m in section.meeting_times
        )
        click.echo(
            f"  {section.course_code:<12} sec {section.section_number:<4} "
            f"{section.professor:<20} {meetings or 'online'}"
        )
    if schedule.conflicts:
        click.echo("Conflicts:")
        for conflict in schedule.conflicts:
            click.echo(f"  [{conflict.kind.value}] {conflict.message}")
