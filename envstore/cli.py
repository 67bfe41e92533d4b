#!/usr/bin/env python3
"""
envstore command-line interface.

    envstore show [KEY]            print the resolved configuration tree
    envstore env NAME              print one resolved environment variable
    envstore check FILE            parse an env file and report skipped lines
    envstore generate              write a new env file
"""

import json
import logging
import sys
from typing import Any, Dict, Tuple

import click
import yaml

from . import __version__
from .config.config_store import ConfigStore, NOT_A_MAP
from .config.dotenv_parser import DotEnv
from .config.env_generator import DEFAULT_FIELDS, SUGGESTED_FILENAMES, EnvFileGenerator
from .config.errors import DotEnvError
from .utils.logger import setup_logging

logger = logging.getLogger(__name__)


def _render(value: Any, output_format: str) -> str:
    if output_format == 'json':
        return json.dumps(value, indent=2, default=str)
    if isinstance(value, (dict, list)):
        return yaml.safe_dump(value, default_flow_style=False, sort_keys=False, allow_unicode=True).rstrip()
    return '' if value is None else str(value)


def _parse_assignments(assignments: Tuple[str, ...]) -> Dict[str, str]:
    values = {}
    for item in assignments:
        if '=' not in item:
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}", param_hint='--set')
        key, value = item.split('=', 1)
        values[key.strip()] = value
    return values


@click.group()
@click.option('--log-level', default='WARNING', show_default=True,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False))
@click.option('--log-file', type=click.Path(dir_okay=False), default=None, help='Also log to this file.')
@click.option('--log-from-config', is_flag=True,
              help="Reconfigure logging from the store's logging section once it is loaded.")
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, log_level, log_file, log_from_config):
    """Inspect and generate env-file configuration."""
    ctx.obj = {'log_level': log_level, 'log_file': log_file, 'log_from_config': log_from_config}
    setup_logging(log_level=log_level, log_file=log_file, stream=sys.stderr)


def _load_store(env_file, root) -> ConfigStore:
    try:
        store = ConfigStore(env_file=env_file, root_path=root).init()
    except DotEnvError as e:
        raise click.ClickException(str(e))

    options = click.get_current_context().obj or {}
    if options.get('log_from_config'):
        setup_logging(store.all(), log_level=options['log_level'], log_file=options['log_file'], stream=sys.stderr)
    return store


@cli.command()
@click.argument('key', required=False)
@click.option('--env-file', default='.env', show_default=True, help='Env file name, relative to --root.')
@click.option('--root', type=click.Path(file_okay=False), default=None, help='Project root directory.')
@click.option('--format', 'output_format', type=click.Choice(['yaml', 'json']), default='yaml', show_default=True)
def show(key, env_file, root, output_format):
    """Print the configuration tree, or the value at a dotted KEY."""
    store = _load_store(env_file, root)

    if key is None:
        click.echo(_render(store.all(), output_format))
        return

    result = store.lookup(key)
    if not result.found:
        if result.reason == NOT_A_MAP:
            raise click.ClickException(f"{key}: '{result.missing_segment}' is under a non-mapping value")
        raise click.ClickException(f"{key}: '{result.missing_segment}' not found")

    click.echo(_render(result.value, output_format))


@cli.command(name='env')
@click.argument('name')
@click.option('--default', 'default', default=None, help='Value printed when NAME is unset.')
@click.option('--env-file', default='.env', show_default=True)
@click.option('--root', type=click.Path(file_okay=False), default=None)
def env_command(name, default, env_file, root):
    """Print NAME resolved through the OS environment and the env file."""
    store = _load_store(env_file, root)

    value = store.resolve_env(name, default)
    if value is None:
        raise click.ClickException(f"{name} is not set")
    click.echo(value)


@cli.command()
@click.argument('path', type=click.Path(dir_okay=True))
@click.option('--values', 'show_values', is_flag=True, help='Also print the parsed variables.')
def check(path, show_values):
    """Parse an env file and report malformed lines."""
    try:
        dotenv = DotEnv(path)
        dotenv.load()
    except DotEnvError as e:
        raise click.ClickException(str(e))

    click.echo(f"{path}: {len(dotenv)} variables")
    for warning in dotenv.warnings:
        click.echo(f"  skipped {warning}")

    if show_values:
        for name, value in dotenv.all().items():
            click.echo(f"{name}={json.dumps(value)}")


@cli.command()
@click.option('--filename', default='.env', show_default=True,
              help=f"One of {', '.join(SUGGESTED_FILENAMES)}, or any .env.<suffix>")
@click.option('--dir', 'directory', type=click.Path(file_okay=False), default='.', show_default=True)
@click.option('--set', 'assignments', multiple=True, metavar='KEY=VALUE',
              help=f"Field value; fields: {', '.join(DEFAULT_FIELDS)}")
@click.option('--backup', is_flag=True, help='Keep the existing file as <name>.backup')
def generate(filename, directory, assignments, backup):
    """Write an env file from the default fields and --set values."""
    values = _parse_assignments(assignments)

    unknown = sorted(set(values) - set(DEFAULT_FIELDS))
    if unknown:
        logger.warning(f"Ignoring unknown fields: {', '.join(unknown)}")

    result = EnvFileGenerator().save(values, filename=filename, directory=directory, backup=backup)
    if not result.ok:
        raise click.ClickException(result.message)

    click.echo(result.message)
    click.echo(result.preview)


def main():
    cli()


if __name__ == '__main__':
    main()
