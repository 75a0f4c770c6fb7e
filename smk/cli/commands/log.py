"""Log command - show commit history."""

import click
from collections import defaultdict
from colorama import Fore, Style
from smk.core.repository import Repository
from smk.operations.commit import iter_history
from smk.cli.output import error, info, format_timestamp


def get_branch_labels(repo):
    """Map commit hash to the names of branches pointing at it."""
    labels = defaultdict(list)
    for name, commit_hash in repo.refs.list_branches():
        if commit_hash:
            labels[commit_hash].append(name)
    return labels


@click.command('log')
@click.argument('branch', required=False)
@click.option('--oneline', is_flag=True, help='Show each commit on a single line')
@click.option('-n', '--max-count', type=int, help='Limit the number of commits')
def log_cmd(branch, oneline, max_count):
    """
    Show commit history.

    Walks every parent link breadth-first from the tip, so the history of
    both sides of a merge is shown, each commit once.

    Examples:
        smk log
        smk log --oneline
        smk log -n 5 feature
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a smk repository"))
        raise click.Abort()

    if branch:
        if not repo.refs.branch_exists(branch):
            click.echo(error(f"Branch '{branch}' not found"))
            raise click.Abort()
        start = repo.refs.read_ref(branch)
    else:
        start = repo.refs.resolve_head()

    if not start:
        click.echo(info("No commits yet"))
        return

    labels = get_branch_labels(repo)
    current_branch = repo.refs.get_current_branch()

    for count, (commit_hash, commit) in enumerate(iter_history(repo, start)):
        if max_count is not None and count >= max_count:
            break

        names = []
        for name in labels.get(commit_hash, []):
            names.append(f"HEAD -> {name}" if name == current_branch else name)
        decoration = f" {Fore.GREEN}({', '.join(names)}){Style.RESET_ALL}" if names else ""

        if oneline:
            click.echo(f"{Fore.YELLOW}{commit_hash[:7]}{Style.RESET_ALL}{decoration} {commit.summary}")
            continue

        click.echo(f"{Fore.YELLOW}commit {commit_hash}{Style.RESET_ALL}{decoration}")
        if len(commit.parents) > 1:
            click.echo(f"Merge: {' '.join(p[:7] for p in commit.parents)}")
        click.echo(f"Author: {commit.author}")
        click.echo(f"Date:   {format_timestamp(commit.timestamp)}")
        click.echo()
        for line in commit.message.split('\n'):
            click.echo(f"    {line}")
        click.echo()
