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

import logging
import shutil
import subprocess

from .base_config import BaseScheduler

logger = logging.getLogger(__name__)


class ToolforgeScheduler(BaseScheduler):
    """Wikimedia Toolforge jobs framework, driven through the ``toolforge`` CLI."""

    executable = "toolforge"
    script_line_breaks = ("--image", "--command", "--filelog")

    def delete_command(self, name):
        return [self.executable, "jobs", "delete", name]

    def run_command(self, job):
        cmd = [
            self.executable, "jobs", "run",
            "--mem", job.memory,
            "--cpu", str(job.cpu),
        ]
        if job.continuous:
            cmd.append("--continuous")
        cmd.append(f"--mount={job.mount}")
        cmd.extend(["--image", job.image])
        cmd.extend(["--command", job.command.to_command_line()])
        if job.filelog:
            cmd.extend(["--filelog", "-o", job.logs.stdout, "-e", job.logs.stderr])
        cmd.append(job.name)
        return cmd

    def check_access(self):
        if shutil.which(self.executable) is None:
            return False, f"'{self.executable}' command not found in PATH"

        try:
            result = subprocess.run([self.executable, "jobs", "list"],
                                    capture_output=True, text=True, check=False)
        except OSError as e:
            return False, f"Failed to run '{self.executable}': {str(e)}"

        if result.returncode != 0:
            detail = (result.stderr or result.stdout).strip()
            return False, f"Toolforge jobs API is not accessible: {detail}"
        return True, "Toolforge jobs API is accessible"
