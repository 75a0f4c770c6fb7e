"""Initialize a new Smk repository."""

import click
from pathlib import Path
from smk.core.errors import SmkError
from smk.core.repository import Repository
from smk.cli.output import success, error, info


@click.command('init')
@click.argument('path', default='.')
def init_cmd(path):
    """
    Initialize a new Smk repository.

    Creates a .smk directory with an empty object store, an empty index
    and a 'master' branch that has no commits yet.

    Examples:
        smk init                    # Initialize in current directory
        smk init my-project         # Initialize in my-project directory
    """
    repo_path = Path(path).resolve()

    try:
        if not repo_path.exists():
            repo_path.mkdir(parents=True)
            click.echo(info(f"Created directory {repo_path}"))

        repo = Repository(str(repo_path)).init()
    except SmkError as e:
        click.echo(error(str(e)))
        raise click.Abort()
    except PermissionError:
        click.echo(error(f"Permission denied: Cannot create repository at {path}"))
        raise click.Abort()

    click.echo(success(f"Initialized empty Smk repository in {repo.smk_dir}"))
    click.echo(info("Start tracking files with:"))
    click.echo(info("  smk add <file>"))
    click.echo(info("  smk commit -m 'message'"))
