"""Checkout command - switch branches."""

import click
from smk.core.errors import SmkError
from smk.core.repository import Repository
from smk.operations.checkout import checkout_branch
from smk.cli.output import success, error, info, warning


@click.command('checkout')
@click.argument('branch')
def checkout_cmd(branch):
    """
    Switch to a branch.

    Replaces the tracked files in the working directory with the branch's
    snapshot and resets the staging area to it. Uncommitted changes are
    reported but do not stop the switch.

    Examples:
        smk checkout feature
        smk checkout master
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a smk repository"))
        raise click.Abort()

    try:
        result = checkout_branch(repo, branch)
    except SmkError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    if result.had_uncommitted_changes:
        click.echo(warning("You had uncommitted changes; they may have been overwritten"))

    click.echo(success(f"Switched to branch '{result.branch}'"))
    click.echo(info(f"HEAD is now at {result.commit_hash[:7]}"))
    click.echo(info(f"Updated {result.files_written} file(s), removed {result.files_removed}"))
