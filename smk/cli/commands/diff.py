"""Diff command - show changes between snapshots."""

import click
from smk.core.errors import SmkError
from smk.core.repository import Repository
from smk.operations.commit import resolve_commit
from smk.cli.output import error, info


@click.command('diff')
@click.argument('commits', nargs=-1)
@click.option('--no-color', is_flag=True, help='Disable colored output')
def diff_cmd(commits, no_color):
    """
    Show changes.

    Line changes are compared position by position: line N of the old
    version against line N of the new one.

    Examples:
        smk diff                    # Working directory vs staged snapshot
        smk diff HEAD               # Working directory vs last commit
        smk diff abc1234 def5678    # Between two commits
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a smk repository"))
        raise click.Abort()

    if len(commits) > 2:
        click.echo(error("Too many arguments: give at most two commits"))
        raise click.Abort()

    try:
        if not commits:
            diffs = repo.diff.diff_unstaged()
        elif len(commits) == 1:
            if commits[0] != 'HEAD':
                click.echo(error("Use 'smk diff HEAD' or 'smk diff <commit> <commit>'"))
                raise click.Abort()
            diffs = repo.diff.diff_head()
        else:
            old_hash = resolve_commit(repo, commits[0])
            new_hash = resolve_commit(repo, commits[1])
            diffs = repo.diff.diff_commits(old_hash, new_hash)
    except SmkError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    if not diffs:
        click.echo(info("No differences"))
        return

    click.echo(repo.diff.format_diff(diffs, color=not no_color))
