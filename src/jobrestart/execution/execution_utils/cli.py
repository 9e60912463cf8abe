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

"""CLI plugin for job management."""

import os
import sys

import click

from jobrestart.common import dump_job_config, load_job_config, save_job_config
from jobrestart.common.cli import (ProjectConfig, get_project_config,
                                   handle_cli_exception)
from jobrestart.common.cli.project_config import DEFAULT_SCHEDULER
from jobrestart.execution.job_execution import (JobRestarter, get_scheduler,
                                                write_restart_script)
from jobrestart.execution.job_execution.script import format_command


def resolve_job_settings(config=None, scheduler=None):
    """Resolve the config file and scheduler name for a job command.

    Explicit options win, then the project file, then the built-in defaults.

    Returns:
        tuple: (config_path or None, scheduler name)
    """
    project_config = None
    if ProjectConfig.find_project_file():
        project_config = get_project_config()

    if config is None and project_config:
        config = project_config.config_path
    if scheduler is None:
        scheduler = project_config.scheduler if project_config else DEFAULT_SCHEDULER
    return config, scheduler


config_option = click.option('--config', '-c', default=None, type=click.Path(exists=True, dir_okay=False),
                             help='Job configuration file (uses project config or built-in job if not specified)')
scheduler_option = click.option('--scheduler', '-s', default=None,
                                help='Scheduler backend (uses project setting or "toolforge" if not specified)')


@click.group()
def job():
    """Restart and inspect the continuous job.

    Without a configuration file the built-in ``rustbot`` job definition
    is used.
    """


@job.command()
@config_option
@scheduler_option
@click.option('--dry-run', '-n', is_flag=True,
              help='Only print the commands, do not run them or touch log files')
def restart(config, scheduler, dry_run):
    """Restart the job.

    Deletes the job, clears its log files and starts it again. The outcome
    of each step is reported but not acted upon: a failing delete (e.g. the
    job was not running) does not prevent the new job from being started.

    The exit status is the one of the job creation call.
    """
    try:
        config, scheduler = resolve_job_settings(config, scheduler)
        job_config = load_job_config(config)
        restarter = JobRestarter(job_config, get_scheduler(scheduler), dry_run=dry_run)
        report = restarter.restart()
    except click.ClickException:
        raise
    except Exception as e:  # pylint: disable=broad-except
        handle_cli_exception(e)

    for step in report.steps:
        if not step.executed:
            status = "skipped (dry-run)"
        elif step.ok:
            status = "ok"
        else:
            status = f"failed (exit code {step.returncode})"
        click.echo(f"{step.name}: {status}")
    sys.exit(report.exit_code)


@job.command()
@config_option
@scheduler_option
@click.option('--output', '-o', default=None, type=click.Path(dir_okay=False),
              help='Also write the resolved job configuration to this file')
def show(config, scheduler, output):
    """Show the resolved job definition and the commands a restart issues."""
    try:
        config, scheduler = resolve_job_settings(config, scheduler)
        job_config = load_job_config(config)
        backend = get_scheduler(scheduler)
    except click.ClickException:
        raise
    except Exception as e:  # pylint: disable=broad-except
        handle_cli_exception(e)

    click.echo(f"# Configuration: {config or 'built-in'}")
    click.echo(dump_job_config(job_config))
    click.echo("# Commands:")
    click.echo(format_command(backend.delete_command(job_config.name)))
    click.echo(format_command(backend.run_command(job_config)))

    if output:
        save_job_config(job_config, output)
        click.echo(f"\nConfiguration written to {output}")


@job.command()
@click.argument('output', type=click.Path(dir_okay=False))
@config_option
@scheduler_option
def prepare_script(output, config, scheduler):
    """Write a bash script that restarts the job.

    The script issues the same delete, log clearing and run commands as
    ``jobrestart job restart``. It can be copied to a host that only has
    the scheduler CLI available.
    """
    try:
        config, scheduler = resolve_job_settings(config, scheduler)
        job_config = load_job_config(config)
        script_path = write_restart_script(os.path.abspath(output), job_config, get_scheduler(scheduler))
    except click.ClickException:
        raise
    except Exception as e:  # pylint: disable=broad-except
        handle_cli_exception(e)

    click.echo(f"Restart script written to {script_path}")
