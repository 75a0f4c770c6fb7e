"""CLI commands for Smk."""

from smk.cli.commands.init import init_cmd
from smk.cli.commands.add import add_cmd
from smk.cli.commands.commit import commit_cmd
from smk.cli.commands.status import status_cmd
from smk.cli.commands.branch import branch_cmd
from smk.cli.commands.checkout import checkout_cmd
from smk.cli.commands.merge import merge_cmd
from smk.cli.commands.diff import diff_cmd
from smk.cli.commands.log import log_cmd
from smk.cli.commands.show import show_cmd

__all__ = ['init_cmd', 'add_cmd', 'commit_cmd', 'status_cmd', 'branch_cmd',
           'checkout_cmd', 'merge_cmd', 'diff_cmd', 'log_cmd', 'show_cmd']
