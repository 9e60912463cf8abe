#!/usr/bin/env python3
# Copyright (C) 2025 Frederik Pasch
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing,
# software distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions
# and limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""Main CLI entry point for jobrestart."""

import os
import sys
from importlib.metadata import entry_points

import click

from jobrestart.execution.job_execution import get_scheduler

from ..logging_config import (LOG_LEVELS, setup_logging,
                              setup_logging_from_project_config)
from .checks import check_config, check_scheduler_access
from .project_config import DEFAULT_SCHEDULER, ProjectConfig


@click.group()
@click.version_option(package_name="jobrestart", prog_name="jobrestart")
@click.option('--log-level', '-l', default=None,
              type=click.Choice(LOG_LEVELS, case_sensitive=False),
              help='Logging level (uses project setting or INFO if not specified)')
def cli(log_level):
    """jobrestart - restart continuous scheduler jobs.

    Deletes a continuous job, clears its log files and starts it again
    with a fixed resource profile, image and command.

    See ``jobrestart --help`` for a list of available commands.
    """
    if log_level:
        setup_logging(log_level)
    else:
        setup_logging_from_project_config()


@cli.command()
@click.argument('config', required=False, type=click.Path(exists=True, dir_okay=False))
@click.option('--scheduler', '-s', default=DEFAULT_SCHEDULER,
              help='Scheduler backend used to run the job')
@click.option('--log-level', 'project_log_level', default="INFO",
              type=click.Choice(LOG_LEVELS, case_sensitive=False),
              help='Default logging level stored in the project file')
@click.option('--force', '-f', is_flag=True,
              help='Skip configuration and scheduler accessibility checks')
def init(config, scheduler, project_log_level, force):
    """Initialize a jobrestart project.

    Creates a `.jobrestart_project` file in the current directory that
    stores the configuration file path, the scheduler backend and the log
    level. These settings will be used by other commands automatically.
    Without CONFIG the built-in job definition is used.

    By default, performs the following checks before initialization:

    * the configuration file is valid
    * the scheduler CLI is installed and its API is reachable

    Use the ``--force`` flag to skip all these checks if needed.
    """
    # An unknown backend name is an error even with --force
    try:
        backend = get_scheduler(scheduler)
    except ValueError as e:
        click.echo(f"✗ Error: {e}", err=True)
        sys.exit(1)

    if force:
        click.echo("⚠ Warning: Skipping checks (--force enabled)")
    else:
        config_ok, config_msg = check_config(config)
        if not config_ok:
            click.echo(f"✗ Error: {config_msg}", err=True)
            sys.exit(1)
        click.echo(f"✓ {config_msg}")

        click.echo(f"Checking {scheduler} access...")
        access_ok, access_msg = check_scheduler_access(backend)
        if not access_ok:
            click.echo(f"✗ Error: {access_msg}", err=True)
            click.echo("  Use --force to initialize anyway.", err=True)
            sys.exit(1)
        click.echo(f"✓ {access_msg}")

    config_path = os.path.abspath(config) if config else None
    project_config = ProjectConfig(config_path=config_path, scheduler=scheduler,
                                   log_level=project_log_level.upper())

    is_valid, error = project_config.validate()
    if not is_valid:
        click.echo(f"✗ Error: {error}", err=True)
        sys.exit(1)

    existing_file = ProjectConfig.find_project_file()
    if existing_file:
        click.echo(f"⚠ Warning: Overwriting existing project file: {existing_file}")

    project_file = project_config.save()

    click.echo("✓ Project initialized successfully!")
    click.echo(f"  Configuration: {config_path or 'built-in'}")
    click.echo(f"  Scheduler: {scheduler}")
    click.echo(f"  Project file: {project_file}")


@cli.command()
def install_completion():
    """Install shell completion for the jobrestart command.

    Auto-detects your shell and installs completion to the appropriate config file.
    """
    shell_env = os.environ.get('SHELL', '')
    if 'zsh' in shell_env:
        script = 'eval "$(_JOBRESTART_COMPLETE=zsh_source jobrestart)"'
        config_file = os.path.expanduser('~/.zshrc')
    elif 'fish' in shell_env:
        script = '_JOBRESTART_COMPLETE=fish_source jobrestart | source'
        config_file = os.path.expanduser('~/.config/fish/config.fish')
    else:
        script = 'eval "$(_JOBRESTART_COMPLETE=bash_source jobrestart)"'
        config_file = os.path.expanduser('~/.bashrc')

    try:
        os.makedirs(os.path.dirname(config_file), exist_ok=True)

        if os.path.exists(config_file):
            with open(config_file, 'r') as f:
                if script in f.read():
                    click.echo(f"✓ Completion already installed in {config_file}")
                    return

        with open(config_file, 'a') as f:
            f.write(f"\n# jobrestart CLI completion\n{script}\n")
    except OSError as e:
        click.echo(f"✗ Failed to install completion: {e}", err=True)
        sys.exit(1)

    click.echo("✓ Completion installed successfully!")
    click.echo(f"  Added to: {config_file}")
    click.echo()
    click.echo("Restart your shell or run:")
    click.echo(f"  source {config_file}")


def load_plugins():
    """Dynamically load all jobrestart CLI plugins from entry points."""
    try:
        eps = entry_points(group='jobrestart.cli_plugins')

        for ep in eps:
            try:
                # The entry point returns a Click group or command
                plugin_group = ep.load()
                cli.add_command(plugin_group, name=ep.name)
            except Exception as e:  # pylint: disable=broad-except
                click.echo(f"Warning: Failed to load plugin '{ep.name}': {e}", err=True)
    except Exception as e:  # pylint: disable=broad-except
        click.echo(f"Warning: Failed to load plugins: {e}", err=True)


def main():
    """Main entry point for the jobrestart CLI."""
    load_plugins()
    cli()


if __name__ == '__main__':
    main()
