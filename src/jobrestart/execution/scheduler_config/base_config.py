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
import shlex
import subprocess

logger = logging.getLogger(__name__)

# Exit status a shell reports for a command it cannot find
COMMAND_NOT_FOUND = 127


class BaseScheduler(object):
    """Base class for job scheduler backends.

    Subclasses render the command lines of the scheduler CLI; running them
    is shared. Return codes are reported to the caller and never acted upon.
    """

    # Options after which the rendered restart script starts a new line
    script_line_breaks = ()

    def delete_command(self, name):
        """Command line that deletes the job ``name``."""
        raise NotImplementedError("delete_command method must be implemented by subclasses.")

    def run_command(self, job):
        """Command line that submits ``job`` (a JobConfig)."""
        raise NotImplementedError("run_command method must be implemented by subclasses.")

    def check_access(self):
        """Check that the scheduler can be reached.

        Returns:
            tuple: (bool, str) - (success, message)
        """
        raise NotImplementedError("check_access method must be implemented by subclasses.")

    def delete_job(self, name):
        return self.execute(self.delete_command(name))

    def run_job(self, job):
        return self.execute(self.run_command(job))

    def execute(self, cmd):
        """Run ``cmd`` to completion and log its output.

        Returns:
            subprocess.CompletedProcess with captured stdout and stderr
        """
        logger.debug(f"Running: {shlex.join(cmd)}")
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except FileNotFoundError as e:
            logger.error(f"Command not found: {cmd[0]}")
            return subprocess.CompletedProcess(cmd, COMMAND_NOT_FOUND, stdout="", stderr=str(e))

        if result.stdout and result.stdout.strip():
            logger.info(result.stdout.rstrip())
        if result.stderr and result.stderr.strip():
            logger.warning(result.stderr.rstrip())
        if result.returncode != 0:
            logger.debug(f"'{shlex.join(cmd)}' exited with code {result.returncode}")
        return result
