"""Branch command - manage branches."""

import click
from colorama import Fore, Style
from smk.core.errors import SmkError
from smk.core.objects import Commit
from smk.core.repository import Repository
from smk.cli.output import success, error, warning


def get_commit_info(repo, commit_hash):
    """Get commit message summary."""
    commit = repo.read_object(commit_hash)
    if not isinstance(commit, Commit):
        return "(no commits)"
    message = commit.summary
    if len(message) > 50:
        message = message[:47] + "..."
    return message


@click.command('branch')
@click.option('-d', '--delete', 'delete_branch_name', metavar='BRANCH', help='Delete a branch')
@click.option('-v', '--verbose', is_flag=True, help='Show commit hash and message')
@click.argument('branch_name', required=False)
def branch_cmd(delete_branch_name, verbose, branch_name):
    """
    List, create, or delete branches.

    With no arguments, lists all branches. Current branch is highlighted with *.
    With one argument, creates a new branch at HEAD.

    Examples:
        smk branch                    # List branches
        smk branch feature            # Create 'feature' branch at HEAD
        smk branch -d feature         # Delete 'feature' branch
        smk branch -v                 # List branches with commit info
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a smk repository"))
        raise click.Abort()

    try:
        if delete_branch_name:
            repo.refs.delete_branch(delete_branch_name)
            click.echo(success(f"Deleted branch {delete_branch_name}"))
            return

        if branch_name:
            commit_hash = repo.refs.create_branch(branch_name)
            click.echo(success(f"Created branch '{branch_name}' at {commit_hash[:7]}"))
            return
    except SmkError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    branches = repo.refs.list_branches()
    if not branches:
        click.echo(warning("No branches found"))
        return

    current_branch = repo.refs.get_current_branch()
    for name, commit_hash in branches:
        if name == current_branch:
            prefix = f"{Fore.GREEN}* {Style.RESET_ALL}"
            name_color = Fore.GREEN
        else:
            prefix = "  "
            name_color = ""

        if verbose:
            short = commit_hash[:7] if commit_hash else '-------'
            click.echo(f"{prefix}{name_color}{name:<20}{Style.RESET_ALL} {short} "
                       f"{get_commit_info(repo, commit_hash)}")
        else:
            click.echo(f"{prefix}{name_color}{name}{Style.RESET_ALL}")
