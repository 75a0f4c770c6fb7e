"""Add command - stage files for commit."""

import click
from pathlib import Path
from smk.core.repository import Repository
from smk.core.index import Index
from smk.cli.output import success, error, info


def expand_paths(repo, paths):
    """
    Turn command-line paths into work tree files.

    Directories expand to every non-hidden file beneath them, so '.' stages
    the whole work tree.

    Returns:
        Tuple of (files to stage, [(path, reason)] for paths that failed)
    """
    files = []
    failed = []
    tracked_files = None

    for path_arg in paths:
        resolved = (Path.cwd() / path_arg).resolve()

        if not resolved.exists():
            failed.append((path_arg, "File not found"))
        elif resolved.is_file():
            files.append(resolved)
        else:
            try:
                prefix = resolved.relative_to(repo.work_tree).as_posix()
            except ValueError:
                failed.append((path_arg, "Outside repository"))
                continue

            if tracked_files is None:
                tracked_files = repo.files.list_files()
            for rel_path in tracked_files:
                if prefix == '.' or rel_path.startswith(prefix + '/'):
                    files.append(repo.work_tree / rel_path)

    return files, failed


@click.command('add')
@click.argument('paths', nargs=-1, required=True)
def add_cmd(paths):
    """
    Add file contents to the staging area.

    Stage files for the next commit. Modified files must be added
    again to stage the new changes.

    During a merge with conflicts, adding a file marks it as resolved.

    Examples:
        smk add file.txt
        smk add src
        smk add .
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a smk repository"))
        raise click.Abort()

    index = Index.load(repo)
    files, failed_files = expand_paths(repo, paths)

    added_files = []
    for file_path in files:
        try:
            index.add_file(repo, str(file_path))
            added_files.append(file_path.relative_to(repo.work_tree).as_posix())
        except (OSError, ValueError) as e:
            failed_files.append((str(file_path), str(e)))

    if added_files:
        index.save(repo)
        click.echo(success(f"Added {len(added_files)} file(s) to staging area"))
        for file in added_files:
            click.echo(info(f"  {file}"))

        if repo.merge.is_merge_in_progress():
            click.echo(info("Merge in progress: run 'smk commit' to complete the merge"))

    if failed_files:
        click.echo(error(f"Failed to add {len(failed_files)} file(s):"))
        for file, reason in failed_files:
            click.echo(error(f"  {file}: {reason}"))

    if not added_files and not failed_files:
        click.echo(error("No files matched"))
