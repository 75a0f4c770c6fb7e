"""Status command - show working tree status."""

import click
from colorama import Fore, Style
from smk.core.repository import Repository
from smk.operations.status import compute_status
from smk.cli.output import success, error, info, warning


def _section(title, entries, color):
    click.echo(f"{Style.BRIGHT}{title}{Style.RESET_ALL}")
    for label, path in entries:
        click.echo(f"  {color}{label:<10} {path}{Style.RESET_ALL}")
    click.echo()


@click.command('status')
def status_cmd():
    """
    Show the working tree status.

    Displays:
    - Changes staged for commit
    - Changes not staged for commit (modified or deleted files)
    - Untracked files

    Examples:
        smk status
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a smk repository"))
        raise click.Abort()

    report = compute_status(repo)

    if report.is_detached:
        click.echo(warning(f"HEAD detached at {report.head[:7]}"))
    else:
        click.echo(info(f"On branch {report.branch}"))

    if report.head:
        click.echo(info(f"{report.commit_count} commit(s) in history"))
    else:
        click.echo(info("No commits yet"))

    if report.merge_in_progress:
        click.echo(warning("Merge in progress: resolve conflicts, then 'smk commit'"))

    click.echo()

    if report.has_staged:
        staged = [('new file:', p) for p in report.staged_new]
        staged += [('modified:', p) for p in report.staged_modified]
        staged += [('deleted:', p) for p in report.staged_deleted]
        _section("Changes to be committed:", sorted(staged, key=lambda x: x[1]), Fore.GREEN)

    if report.has_unstaged:
        unstaged = [('modified:', p) for p in report.unstaged_modified]
        unstaged += [('deleted:', p) for p in report.unstaged_deleted]
        _section("Changes not staged for commit:", sorted(unstaged, key=lambda x: x[1]), Fore.RED)

    if report.untracked:
        _section("Untracked files:", [('', p) for p in report.untracked], Fore.RED)

    if report.is_clean and not report.untracked:
        click.echo(success("Nothing to commit, working tree clean"))
