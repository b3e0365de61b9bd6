"""
Note Commands
-------------

Browse and create periodic notes.

Commands:
    - list: Reconcile the notes of one granularity and print the cards
    - create: Create the note of the period containing a date
    - candidates: Hierarchical candidate periods under a selection
    - copy-section: Copy a heading section into the note of another period
"""
import asyncio
from datetime import date

import click

from perinotes.core.cli import ReconcileStats
from perinotes.core.cli_options import date_argument, granularity_argument, granularity_option
from perinotes.core.exceptions import ConfigurationError, DocumentStoreError, ValidationError
from perinotes.core.logging_manager import handle_cli_error
from perinotes.notes.creation import LocalTemplateExpander, NoteCreationService, note_path
from perinotes.notes.done_reviews import DoneReviewsStore
from perinotes.notes.notices import EchoNotifier
from perinotes.notes.sections import SectionCopier
from perinotes.periods.granularity import Granularity, parse_granularities
from perinotes.periods.merge import SortDirection
from perinotes.periods.period_calendar import iso_week_start, period_label
from perinotes.periods.selection import SelectionContext, generate_candidates
from perinotes.view.completion import CompletionTracker
from perinotes.view.periodic_view import PeriodicNotesView
from perinotes.view.renderer import ListRenderer
from . import get_settings, get_store, require_enabled


@click.command("list")
@granularity_option(help_text="Granularity to list (default: view mode from settings)")
@click.option("--asc", "ascending", is_flag=True, help="Oldest first")
@click.option("--no-missing", is_flag=True, help="Hide missing-period placeholders")
@click.option(
    "--future",
    type=click.IntRange(0, 12),
    default=None,
    help="Future periods to propose (default: from settings)",
)
@click.pass_context
def list_notes(ctx, granularity, ascending, no_missing, future):
    """Show the periodic notes list with missing periods."""
    logger = ctx.obj["logger"]
    try:
        settings = get_settings(ctx)
        changes = {}
        if granularity:
            changes["mode"] = Granularity.parse(granularity)
        if ascending:
            changes["direction"] = SortDirection.ASC
        if no_missing:
            changes["show_missing"] = False
        if future is not None:
            changes["future_periods"] = future
        if changes:
            settings = settings.with_view(**changes)
        require_enabled(settings, settings.view.mode)

        store = get_store(ctx)
        renderer = ListRenderer()
        completion = CompletionTracker(
            store, settings, DoneReviewsStore(ctx.obj["data_path"], logger), logger=logger
        )
        view = PeriodicNotesView(store, settings, renderer, completion=completion, logger=logger)

        async def run():
            script = await view.on_data_updated()
            await view.close()
            return script

        script = asyncio.run(run())
        stats = ReconcileStats.from_script(script, missing=view.last_missing)

        click.echo(f"\n📅 {settings.view.mode.display_name} notes\n")
        for line in renderer.lines():
            click.echo(line)
        click.echo(f"\n{stats.summary()}")
        logger.log_operation("list", {"granularity": settings.view.mode.value, **stats.to_dict()})

    except (ValidationError, DocumentStoreError) as e:
        handle_cli_error(ctx, e, "list", {"granularity": granularity})


@click.command()
@granularity_argument
@date_argument
@click.pass_context
def create(ctx, granularity, when):
    """Create the note for the period containing DATE."""
    logger = ctx.obj["logger"]
    try:
        settings = get_settings(ctx)
        g = Granularity.parse(granularity)
        require_enabled(settings, g)

        store = get_store(ctx)
        service = NoteCreationService(
            store, LocalTemplateExpander(store, logger), EchoNotifier(), logger
        )
        handle = asyncio.run(service.create_periodic_note(when.date(), settings.config(g), g))
        if handle is None:
            ctx.exit(1)
        click.echo(f"📝 {handle}")

    except (ValidationError, DocumentStoreError) as e:
        handle_cli_error(ctx, e, "create", {"granularity": granularity, "date": when})


@click.command()
@granularity_argument
@click.option("--year", type=int, default=None, help="Selected year (default: current year)")
@click.option("--quarter", type=click.IntRange(1, 4), default=None, help="Selected quarter")
@click.option("--month", type=click.IntRange(1, 12), default=None, help="Selected month (1-12)")
@click.option("--week", type=click.IntRange(1, 53), default=None, help="Selected ISO week")
@click.option("--week-year", type=int, default=None, help="ISO week-year of --week")
@click.option(
    "--enabled",
    "enabled_names",
    multiple=True,
    type=click.Choice(Granularity.choices(), case_sensitive=False),
    help="Enabled granularity (repeatable; default: from settings)",
)
@click.pass_context
def candidates(ctx, granularity, year, quarter, month, week, week_year, enabled_names):
    """List candidate periods of GRANULARITY under a selection."""
    try:
        settings = get_settings(ctx)
        g = Granularity.parse(granularity)
        enabled = set(parse_granularities(enabled_names)) if enabled_names else set(settings.enabled)
        enabled.add(g)

        if week is not None and week_year is None:
            week_year = year if year is not None else date.today().year
        if year is None:
            year = iso_week_start(week_year, week).year if week is not None else date.today().year

        context = SelectionContext(
            selected_year=year,
            selected_quarter=quarter,
            selected_month=month - 1 if month is not None else None,
            selected_week=week,
            selected_week_year=week_year,
        )
        dates = generate_candidates(g, context, enabled)

        config = settings.config(g)
        store = get_store(ctx)

        async def existing():
            found = set()
            if config.enabled:
                for value in dates:
                    if await store.get(note_path(value, config, g)) is not None:
                        found.add(value)
            return found

        present = asyncio.run(existing())

        if not dates:
            click.echo("No candidates")
            return
        for value in dates:
            marker = "•" if value in present else "○"
            click.echo(f"  {marker} {period_label(value, g)}  ({value.isoformat()})")

    except (ValidationError, DocumentStoreError) as e:
        handle_cli_error(ctx, e, "candidates", {"granularity": granularity})


@click.command("copy-section")
@granularity_argument
@date_argument
@click.argument("heading")
@click.option(
    "--to",
    "target",
    required=True,
    type=click.Choice(Granularity.choices(), case_sensitive=False),
    help="Granularity of the note receiving the section",
)
@click.option("--level", type=click.IntRange(1, 6), default=None, help="Heading level (default: any)")
@click.pass_context
def copy_section(ctx, granularity, when, heading, target, level):
    """Copy section HEADING of a note into the note of another period."""
    logger = ctx.obj["logger"]
    try:
        settings = get_settings(ctx)
        source_g = Granularity.parse(granularity)
        target_g = Granularity.parse(target)
        require_enabled(settings, source_g)
        require_enabled(settings, target_g)

        copier = SectionCopier(get_store(ctx), EchoNotifier(), logger)
        copied = asyncio.run(
            copier.copy_between_periods(settings, when.date(), source_g, target_g, heading, level)
        )
        if not copied:
            ctx.exit(1)

    except (ValidationError, DocumentStoreError) as e:
        handle_cli_error(
            ctx, e, "copy-section", {"granularity": granularity, "date": when, "heading": heading}
        )
