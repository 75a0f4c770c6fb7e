"""Show command - display a commit and its changes."""

import click
from colorama import Fore, Style
from smk.core.errors import SmkError
from smk.core.repository import Repository
from smk.operations.commit import build_child_index, read_tree, resolve_commit
from smk.cli.output import error, format_timestamp


@click.command('show')
@click.argument('commit', default='HEAD')
@click.option('--no-color', is_flag=True, help='Disable colored output')
def show_cmd(commit, no_color):
    """
    Show a commit: metadata, children and the changes it introduced.

    Changes are shown against the first parent.

    Examples:
        smk show
        smk show abc1234
        smk show feature
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a smk repository"))
        raise click.Abort()

    try:
        commit_hash = resolve_commit(repo, commit)
        obj = repo.read_object(commit_hash)
        parent = obj.parents[0] if obj.parents else None
        diffs = repo.diff.diff_trees(read_tree(repo, parent), read_tree(repo, commit_hash))
    except SmkError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    children = build_child_index(repo).get(commit_hash, [])

    click.echo(f"{Fore.YELLOW}commit {commit_hash}{Style.RESET_ALL}")
    if obj.parents:
        click.echo(f"Parents: {' '.join(p[:7] for p in obj.parents)}")
    if children:
        click.echo(f"Children: {' '.join(c[:7] for c in sorted(children))}")
    click.echo(f"Author: {obj.author}")
    click.echo(f"Date:   {format_timestamp(obj.timestamp)}")
    click.echo()
    for line in obj.message.split('\n'):
        click.echo(f"    {line}")
    click.echo()

    if diffs:
        click.echo(repo.diff.format_diff(diffs, color=not no_color))
