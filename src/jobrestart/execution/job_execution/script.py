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

import os
import re
import shlex

from .logs import backup_path

RESTART_SCRIPT_TEMPLATE = """#!/bin/bash
# Restart the '{name}' job: delete it, clear its logs, start it again.
{delete}
{clear_logs}
{run}
"""

_DOUBLE_QUOTE_UNSAFE = re.compile(r'["$`\\!]')


def quote_argument(arg):
    """Quote a single argument for bash, preferring double quotes over escaped single quotes."""
    quoted = shlex.quote(arg)
    if quoted == arg or "'" not in arg or _DOUBLE_QUOTE_UNSAFE.search(arg):
        return quoted
    return f'"{arg}"'


def format_command(cmd, line_breaks=()):
    """Format an argument list as a bash command, wrapping before ``line_breaks`` and the last argument."""
    lines = [[]]
    for idx, arg in enumerate(cmd):
        is_last = idx == len(cmd) - 1 and idx > 0
        if lines[-1] and (arg in line_breaks or (line_breaks and is_last)):
            lines.append([])
        lines[-1].append(quote_argument(arg))
    return " \\\n\t".join(" ".join(line) for line in lines)


def _clear_logs_commands(logs):
    if logs.mode == 'backup':
        commands = []
        for path in logs.live_paths():
            target = backup_path(path, logs.backup_suffix)
            commands.append(f"touch {quote_argument(path)} && mv -f {quote_argument(path)} {quote_argument(target)}")
        return "\n".join(commands)

    targets = [quote_argument(path) for path in logs.live_paths()]
    # glob patterns stay unquoted so the shell expands them
    targets.extend(logs.clear)
    return "rm -f " + " ".join(targets)


def render_restart_script(job, scheduler):
    """Render a bash script doing the same as a JobRestarter.

    Args:
        job: JobConfig to restart
        scheduler: BaseScheduler rendering the scheduler commands
    """
    return RESTART_SCRIPT_TEMPLATE.format(
        name=job.name,
        delete=format_command(scheduler.delete_command(job.name)),
        clear_logs=_clear_logs_commands(job.logs),
        run=format_command(scheduler.run_command(job), scheduler.script_line_breaks),
    )


def write_restart_script(output_script_path, job, scheduler):
    output_dir = os.path.dirname(output_script_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    with open(output_script_path, 'w') as f:
        f.write(render_restart_script(job, scheduler))
    os.chmod(output_script_path, 0o755)  # Make the script executable
    return output_script_path
