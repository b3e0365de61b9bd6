#!/usr/bin/env python3
"""
Perinotes CLI
-------------

Command-line interface for periodic notes.

This module provides the main CLI group and the shared context setup for
all commands.

Command Structure:
    - Browse (list, candidates)
    - Create (create, copy-section)
    - Review (done)

Usage:
    # Show the reconciled list of the configured granularity
    perinotes --root ~/notes list

    # Create this week's note
    perinotes create weekly 2025-01-02

    # Weeks of February 2024
    perinotes candidates weekly --year 2024 --month 2

    # Carry the "Wins" section of a day into its week
    perinotes copy-section daily 2025-01-02 Wins --to weekly

    # Mark December 2024 (and its weeks and days) done
    perinotes done monthly 2024-12-01
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from pathlib import Path

# --- Third party imports ---
import click

# --- Local imports ---
from perinotes import __version__
from perinotes.core.cli import setup_logger
from perinotes.core.cli_options import config_option, log_dir_option, root_option, verbose_option
from perinotes.core.exceptions import ConfigurationError
from perinotes.core.paths import ROOT, state_paths
from perinotes.notes.settings import PeriodicSettings, load_settings
from perinotes.notes.store import LocalDocumentStore
from perinotes.periods.granularity import Granularity


@click.group()
@root_option
@config_option
@log_dir_option
@verbose_option
@click.version_option(__version__, prog_name="perinotes")
@click.pass_context
def cli(ctx, root, config, log_dir, verbose):
    """Perinotes - calendar-aligned periodic notes"""
    ctx.ensure_object(dict)

    root_path = Path(root).expanduser() if root else ROOT
    paths = state_paths(root_path)

    ctx.obj["root"] = root_path
    ctx.obj["config_path"] = Path(config) if config else paths["config"]
    ctx.obj["data_path"] = paths["data"]
    ctx.obj["log_dir"] = Path(log_dir) if log_dir else paths["logs"]
    ctx.obj["verbose"] = verbose
    ctx.obj["logger"] = setup_logger(ctx.obj["log_dir"], "cli")


def get_settings(ctx) -> PeriodicSettings:
    """Get or load the periodic settings from context."""
    if "settings" not in ctx.obj:
        ctx.obj["settings"] = load_settings(ctx.obj["config_path"], ctx.obj["logger"])
    return ctx.obj["settings"]


def get_store(ctx) -> LocalDocumentStore:
    """Get or create the document store from context."""
    if "store" not in ctx.obj:
        ctx.obj["store"] = LocalDocumentStore(ctx.obj["root"], ctx.obj["logger"])
    return ctx.obj["store"]


def require_enabled(settings: PeriodicSettings, granularity: Granularity) -> None:
    """
    Raises:
        ConfigurationError: If the granularity is disabled in the settings
    """
    if not settings.config(granularity).enabled:
        raise ConfigurationError(
            f"{granularity.display_name} notes are not enabled in the settings"
        )


# Import and register command modules
# These imports must come after CLI group definition
from .notes import candidates, copy_section, create, list_notes  # noqa: E402
from .reviews import done  # noqa: E402

cli.add_command(list_notes)
cli.add_command(create)
cli.add_command(candidates)
cli.add_command(copy_section)
cli.add_command(done)
