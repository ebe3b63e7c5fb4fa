"""
envtool CLI - shell environment synchronizer

Main entry point for the envtool command-line tool.
"""

import os
import sys
from pathlib import Path
from typing import Dict, Optional

import click
from click.core import ParameterSource
from rich.console import Console
from rich.markup import escape

from . import __version__
from .core.config import (
    ConfigError, Settings, load_settings, environ_settings, env_bool,
    DEFAULT_ENV_FILE, DEFAULT_BASHRC_PATH, DEFAULT_ZSHRC_PATH,
)
from .core.envfile import parse_file
from .core.hooks import ShellType, build_hook
from .core.rcfile import ensure_hook_installed
from .core.reconcile import MANAGED_ENV_VARS_KEY, parse_managed, reconcile


DEBUG_ENV_VAR = "ENVTOOL_DEBUG"

console = Console()
# `env` output is evaluated by the shell; everything else goes to stderr
err_console = Console(stderr=True, soft_wrap=True)

SHELL_CHOICES = [shell.value for shell in ShellType]


def _debug(message: str):
    """Print a diagnostic line to stderr when ENVTOOL_DEBUG is set."""
    if env_bool(DEBUG_ENV_VAR, False):
        err_console.print(f"envtool: {message}", style="dim", markup=False, highlight=False)


def _fail(message: str, hint: Optional[str] = None):
    """Report a user-visible error and exit."""
    err_console.print(f"[red]Error: {escape(message)}[/red]")
    if hint:
        err_console.print(f"[dim]{hint}[/dim]")
    sys.exit(1)


def _from_command_line(ctx: click.Context, name: str) -> bool:
    return ctx.get_parameter_source(name) == ParameterSource.COMMANDLINE


def _resolve_env_file(settings: Settings, env_file: Optional[str]) -> str:
    return env_file or settings.env_file


def load_desired(env_path: str) -> Dict[str, str]:
    """
    Parse the .env file, treating a missing or unreadable file as empty.

    Args:
        env_path: Path to the .env file

    Returns:
        Desired key-value pairs
    """
    try:
        return parse_file(env_path)
    except (OSError, UnicodeDecodeError) as exc:
        _debug(f"no variables loaded from {env_path}: {exc}")
        return {}


@click.group()
@click.option('--config', 'config_path', type=click.Path(dir_okay=False),
              help='Config file (default is $HOME/.envtool.yaml)')
@click.option('--env-file', help='Path to .env file (default: .env)')
@click.version_option(__version__, prog_name="envtool")
@click.pass_context
def cli(ctx, config_path, env_file):
    """
    envtool - keep shell environment variables in sync with a .env file
    """
    try:
        settings = load_settings(config_path)
    except ConfigError as exc:
        # `env` runs from the prompt hook and always exits 0
        if ctx.invoked_subcommand != "env":
            _fail(str(exc), "Fix or remove the config file and try again.")
        _debug(f"ignoring config: {exc}")
        settings = environ_settings()

    if settings.config_file:
        _debug(f"using config file {settings.config_file}")

    if env_file:
        settings.env_file = env_file

    ctx.obj = settings


@cli.command()
@click.argument('shell', required=False, default=ShellType.BASH.value,
                type=click.Choice(SHELL_CHOICES, case_sensitive=False))
@click.option('--env-file', help='Path to .env file')
@click.pass_obj
def env(settings, shell, env_file):
    """
    Print shell commands that sync the environment with a .env file.

    Variables exported by the previous run (tracked in
    ENVTOOL_MANAGED_ENV_VARS) are unset when they leave the file. Evaluate
    the output in the shell:

        eval "$(envtool env bash)"
    """
    env_path = _resolve_env_file(settings, env_file)

    desired = load_desired(env_path)
    managed = parse_managed(os.environ.get(MANAGED_ENV_VARS_KEY, ""))

    result = reconcile(managed, desired)
    _debug(
        f"{shell}: {len(result.unset_names)} unset, "
        f"{len(result.exported_names)} exported from {env_path}"
    )

    output = result.render()
    if output:
        click.echo(output)


@cli.command()
@click.argument('paths', nargs=-1, type=click.Path(dir_okay=False))
@click.option('--bashrc', default=DEFAULT_BASHRC_PATH, show_default=True,
              help='Path to bash configuration file')
@click.option('--zshrc', default=DEFAULT_ZSHRC_PATH, show_default=True,
              help='Path to zsh configuration file')
@click.option('--user', 'user_only', is_flag=True,
              help='Modify user-specific configuration files instead of system-wide')
@click.option('--bash', 'bash_only', is_flag=True,
              help='Only update bash configuration (default: both shells)')
@click.option('--zsh', 'zsh_only', is_flag=True,
              help='Only update zsh configuration (default: both shells)')
@click.option('--env-file', help='Path to .env file embedded in the hook')
@click.pass_context
def init(ctx, paths, bashrc, zshrc, user_only, bash_only, zsh_only, env_file):
    """
    Install envtool hooks into shell configuration files.

    The hook runs `envtool env` on every prompt (and directory change in
    zsh). System-wide files are used by default; pass --user for ~/.bashrc
    and ~/.zshrc.

    With --bash or --zsh, optional positional arguments give the rc file and
    the .env file for that shell:

        envtool init --zsh ~/.zshrc ~/project/.env
    """
    settings: Settings = ctx.obj

    if not _from_command_line(ctx, 'bashrc'):
        bashrc = settings.init.bashrc
    if not _from_command_line(ctx, 'zshrc'):
        zshrc = settings.init.zshrc
    user_only = user_only or settings.init.user
    bash_only = bash_only or settings.init.bash
    zsh_only = zsh_only or settings.init.zsh

    update_bash = not (zsh_only and not bash_only)
    update_zsh = not (bash_only and not zsh_only)

    if len(paths) > 2:
        _fail("too many positional arguments",
              "Usage: envtool init --bash|--zsh [RC_PATH [ENV_PATH]]")

    if paths and update_bash and update_zsh:
        _fail("positional rc/env paths are supported only when selecting "
              "exactly one shell with --bash or --zsh")

    if user_only:
        home = Path.home()
        if bashrc == DEFAULT_BASHRC_PATH:
            bashrc = str(home / ".bashrc")
        if zshrc == DEFAULT_ZSHRC_PATH:
            zshrc = str(home / ".zshrc")

    if paths:
        if update_bash:
            bashrc = paths[0]
        else:
            zshrc = paths[0]

    env_for_hook = paths[1].strip() if len(paths) == 2 else ""
    if not env_for_hook:
        configured = _resolve_env_file(settings, env_file).strip()
        if configured and configured != DEFAULT_ENV_FILE:
            env_for_hook = configured

    targets = []
    if update_bash:
        targets.append((ShellType.BASH, bashrc))
    if update_zsh:
        targets.append((ShellType.ZSH, zshrc))

    failed = []
    for shell, rc_path in targets:
        hook = build_hook(shell, env_for_hook or None)
        try:
            appended = ensure_hook_installed(rc_path, hook)
        except (OSError, UnicodeError) as exc:
            err_console.print(
                f"[red]Error: failed to update {shell.label} configuration "
                f"{escape(rc_path)}: {escape(str(exc))}[/red]"
            )
            failed.append(shell)
            continue

        if appended:
            console.print(f"[green]✓ {shell.label}: installed hook in {escape(rc_path)}[/green]")
        else:
            console.print(f"[yellow]{shell.label}: hook already present in {escape(rc_path)}[/yellow]")

    if failed:
        sys.exit(1)

    console.print("\n[bold green]✓ Shell configurations updated successfully![/bold green]")
    if env_for_hook:
        console.print(f"[dim]Hooks load variables from {escape(env_for_hook)}[/dim]")
    console.print("\nOpen a new shell (or source the updated file) to start syncing.")


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
