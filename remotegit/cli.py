#!/usr/bin/env python3

import json
import sys
from contextlib import contextmanager

import click
from rich.console import Console
from rich.table import Table

from remotegit.config import load_config, setup_logging
from remotegit.domain.objects import OBJECT_TYPES
from remotegit.exceptions import RemoteGitError
from remotegit.exit_codes import exit_with_code, get_exit_code_for_exception
from remotegit.repository import Repository

console = Console()


@click.group()
@click.version_option(package_name='remotegit')
@click.option('--git', 'git_path', help='Path to the git binary (default: git on PATH)')
@click.option('--temp-dir', type=click.Path(file_okay=False), help='Directory for the shallow clone')
@click.option('--verbose', '-v', is_flag=True, help='Log git commands to stderr')
@click.pass_context
def cli(ctx, git_path, temp_dir, verbose):
    """remotegit - Read and write a remote git repository without a checkout.

    Every command fetches a bare, shallow, partial clone into a temporary
    directory and removes it again when done.
    """
    config = load_config()
    if git_path:
        config['git']['executable'] = git_path
    if temp_dir:
        config['storage']['temp_directory'] = temp_dir

    setup_logging('DEBUG' if verbose else None, config=config)
    ctx.obj = config


@contextmanager
def open_repository(config, url):
    """Open a Repository for url and exit with a mapped code on failure."""
    try:
        with Repository.from_config(url, config) as repo:
            yield repo
    except RemoteGitError as e:
        exit_with_code(get_exit_code_for_exception(e), f"Error: {e}")


@cli.command('branches')
@click.argument('url')
@click.option('--json', 'json_output', is_flag=True, help='Output as JSONL')
@click.pass_obj
def branches_cmd(config, url, json_output):
    """List the branches of the remote at URL."""
    with open_repository(config, url) as repo:
        branches = sorted(repo.list_branches(), key=lambda b: b.name)

        if json_output:
            for branch in branches:
                click.echo(json.dumps(branch.to_dict()))
            return

        table = Table(title=url)
        table.add_column("Branch", style="cyan")
        table.add_column("Commit", style="green")
        for branch in branches:
            table.add_row(branch.name, branch.commit_hash)
        console.print(table)


@cli.command('head')
@click.argument('url')
@click.pass_obj
def head_cmd(config, url):
    """Show the default branch of the remote at URL."""
    with open_repository(config, url) as repo:
        branch = repo.get_branch('HEAD')
        click.echo(f"{branch.name} {branch.commit_hash}")


@cli.command('cat')
@click.argument('url')
@click.argument('object_hash')
@click.option('--type', '-t', 'object_type', type=click.Choice(sorted(OBJECT_TYPES)),
              default='blob', show_default=True, help='Object type')
@click.pass_obj
def cat_cmd(config, url, object_hash, object_type):
    """Print the raw content of an object."""
    with open_repository(config, url) as repo:
        content = repo.read_object(object_hash, object_type)
        click.echo(content, nl=False)


@cli.command('ls-tree')
@click.argument('url')
@click.argument('branch', default='HEAD', required=False)
@click.option('--json', 'json_output', is_flag=True, help='Output as JSONL')
@click.pass_obj
def ls_tree_cmd(config, url, branch, json_output):
    """List the top-level tree of BRANCH (default: the remote HEAD)."""
    with open_repository(config, url) as repo:
        entries = repo.get_branch(branch).get_tree().list_entries()

        if json_output:
            for entry in entries:
                click.echo(json.dumps(entry.to_dict()))
            return

        table = Table(title=f"{url} {branch}")
        table.add_column("Mode")
        table.add_column("Type", style="cyan")
        table.add_column("Hash", style="green")
        table.add_column("Name")
        for entry in entries:
            table.add_row(entry.mode, entry.type, entry.hash, entry.name)
        console.print(table)


@cli.group('config')
def config_cmd():
    """Configuration commands."""
    pass


@config_cmd.command('show')
@click.pass_obj
def config_show(config):
    """Show the effective configuration as JSON."""
    click.echo(json.dumps(config, indent=2))


def main():
    cli()

if __name__ == "__main__":
    sys.exit(main() or 0)
