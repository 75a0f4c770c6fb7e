"""Merge command for Smk."""

import click
from smk.core.errors import SmkError
from smk.core.repository import Repository
from smk.cli.output import success, error, info, warning


@click.command('merge')
@click.argument('branch')
def merge_cmd(branch):
    """
    Join another branch's history into the current branch.

    Fast-forwards when the current branch has no commits of its own,
    otherwise performs a three-way merge and creates a merge commit.
    On conflicts nothing is committed: the staging area holds the partial
    result and the next 'smk commit' records the merge.

    Examples:
        smk merge feature
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a smk repository"))
        raise click.Abort()

    current_branch = repo.refs.get_current_branch() or 'HEAD'

    try:
        result = repo.merge.merge(branch)
    except SmkError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    if result.up_to_date:
        click.echo(info(result.message))
        return

    if result.is_fast_forward:
        click.echo(success(f"Fast-forward {current_branch} to {result.commit_hash[:7]}"))
        return

    if result.success:
        click.echo(success(f"Merged '{branch}' into {current_branch}"))
        click.echo(info(f"Created merge commit {result.commit_hash[:7]}"))
        return

    click.echo(warning(f"Automatic merge failed: {result.message}"))
    for conflict in result.conflicts:
        click.echo(error(f"  CONFLICT ({conflict.reason}): {conflict.path}"))
    click.echo(info("Fix the files, 'smk add' them, then 'smk commit' to finish the merge"))
