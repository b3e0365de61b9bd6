"""
Review Commands
---------------

Done-review bookkeeping.

Commands:
    - done: Mark a period (and its enabled children) done or not done
"""
import asyncio

import click

from perinotes.core.cli_options import date_argument, granularity_argument
from perinotes.core.exceptions import DocumentStoreError, ValidationError
from perinotes.core.logging_manager import handle_cli_error
from perinotes.notes.done_reviews import DoneReviewsStore, child_period_identifiers
from perinotes.notes.notices import EchoNotifier
from perinotes.periods.granularity import Granularity
from perinotes.periods.period_calendar import period_label
from perinotes.view.completion import CompletionTracker
from . import get_settings, get_store, require_enabled


@click.command()
@granularity_argument
@date_argument
@click.option("--undo", is_flag=True, help="Mark as not done")
@click.pass_context
def done(ctx, granularity, when, undo):
    """Mark the period containing DATE as done (cascading to child periods)."""
    logger = ctx.obj["logger"]
    try:
        settings = get_settings(ctx)
        g = Granularity.parse(granularity)
        require_enabled(settings, g)

        tracker = CompletionTracker(
            get_store(ctx),
            settings,
            DoneReviewsStore(ctx.obj["data_path"], logger),
            notifier=EchoNotifier(),
            logger=logger,
        )
        value = when.date()
        if not asyncio.run(tracker.set_done(value, g, not undo)):
            ctx.exit(1)

        status = "not done" if undo else "done"
        click.echo(f"✅ {period_label(value, g)} marked {status}")
        for child, identifiers in child_period_identifiers(value, g, settings).items():
            if identifiers:
                click.echo(f"  • {len(identifiers)} {child.value} period(s)")

    except (ValidationError, DocumentStoreError) as e:
        handle_cli_error(ctx, e, "done", {"granularity": granularity, "date": when})
