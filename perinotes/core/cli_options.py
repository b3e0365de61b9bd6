#!/usr/bin/env python3
"""
cli_options.py
-------------------
Reusable Click options for the perinotes command-line interface.

Usage:
    from perinotes.core.cli_options import granularity_argument, date_argument

    @cli.command()
    @granularity_argument
    @date_argument
    def create(granularity, when):
        pass
"""
import click

from perinotes.periods.granularity import Granularity


# ═══════════════════════════════════════════════════════════════════════════
# LOGGING OPTIONS
# ═══════════════════════════════════════════════════════════════════════════

verbose_option = click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable verbose logging with detailed output"
)

log_dir_option = click.option(
    "--log-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for log files (default: <root>/.perinotes/logs)"
)


# ═══════════════════════════════════════════════════════════════════════════
# LOCATION OPTIONS
# ═══════════════════════════════════════════════════════════════════════════

root_option = click.option(
    "--root",
    type=click.Path(file_okay=False),
    default=None,
    help="Notes root directory (default: $PERINOTES_HOME or current directory)"
)

config_option = click.option(
    "--config",
    type=click.Path(dir_okay=False),
    default=None,
    help="Settings file (default: <root>/.perinotes/settings.yaml)"
)


# ═══════════════════════════════════════════════════════════════════════════
# PERIOD ARGUMENTS
# ═══════════════════════════════════════════════════════════════════════════

granularity_argument = click.argument(
    "granularity",
    type=click.Choice(Granularity.choices(), case_sensitive=False),
)

date_argument = click.argument(
    "when",
    metavar="DATE",
    type=click.DateTime(formats=["%Y-%m-%d"]),
)


def granularity_option(default=None, help_text="Granularity to operate on"):
    """
    Factory function for an optional granularity choice.

    Args:
        default: Default granularity value (optional)
        help_text: Custom help text

    Returns:
        Click option decorator
    """
    return click.option(
        "-g", "--granularity",
        type=click.Choice(Granularity.choices(), case_sensitive=False),
        default=default,
        help=help_text,
    )
