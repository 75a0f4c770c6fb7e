"""Commit command - create a commit from staged changes."""

import click
from smk.core.errors import SmkError
from smk.core.repository import Repository
from smk.operations.commit import create_commit
from smk.cli.output import success, error, info


@click.command('commit')
@click.option('-m', '--message', required=True, help='Commit message')
@click.option('--amend', is_flag=True, help='Replace the last commit')
def commit_cmd(message, amend):
    """
    Record changes to the repository.

    Creates a commit from the last commit's snapshot plus the staged
    changes. Files deleted from the working directory are left out.

    During a merge, this command completes the merge by creating a merge commit.

    Examples:
        smk commit -m "Initial commit"
        smk commit --amend -m "Better message"
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a smk repository"))
        raise click.Abort()

    try:
        commit_hash = create_commit(repo, message, amend=amend)
    except SmkError as e:
        click.echo(error(str(e)))
        if not amend:
            click.echo(info("Use 'smk add <file>' to stage changes"))
        raise click.Abort()

    commit = repo.read_object(commit_hash)
    branch = repo.refs.get_current_branch() or 'detached HEAD'

    if len(commit.parents) > 1:
        click.echo(success(f"Merge completed! Created merge commit {commit_hash[:7]}"))
    elif amend:
        click.echo(success(f"Amended commit, now {commit_hash[:7]} on {branch}"))
    else:
        click.echo(success(f"Created commit {commit_hash[:7]} on {branch}"))

    click.echo(info(f"Author: {commit.author}"))
    click.echo(info(f"Message: {commit.summary}"))

    if commit.parents:
        click.echo(info(f"Parents: {', '.join(p[:7] for p in commit.parents)}"))
    else:
        click.echo(info("(root commit)"))
