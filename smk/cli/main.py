"""Main CLI entry point for Smk."""

import os
import sys
import click
from colorama import init
from loguru import logger

from smk import __version__
from smk.cli.output import BANNER
from smk.cli.commands import (init_cmd, add_cmd, commit_cmd, status_cmd, branch_cmd,
                              checkout_cmd, merge_cmd, diff_cmd, log_cmd, show_cmd)

# Initialize colorama for cross-platform colored output
init(autoreset=True)


def configure_logging() -> None:
    """Send library log records to stderr at SMK_LOG_LEVEL (default WARNING)."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=os.environ.get('SMK_LOG_LEVEL', 'WARNING').upper(),
        format="<level>{level: <8}</level> | {message}",
    )


class SmkGroup(click.Group):
    """Custom Group class to display banner before help."""

    def format_help(self, ctx, formatter):
        """Override to add banner before help text."""
        click.echo(BANNER)
        super().format_help(ctx, formatter)


@click.group(cls=SmkGroup)
@click.version_option(version=__version__)
def cli():
    configure_logging()


cli.add_command(init_cmd)
cli.add_command(add_cmd)
cli.add_command(commit_cmd)
cli.add_command(status_cmd)
cli.add_command(branch_cmd)
cli.add_command(checkout_cmd)
cli.add_command(merge_cmd)
cli.add_command(diff_cmd)
cli.add_command(log_cmd)
cli.add_command(show_cmd)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
