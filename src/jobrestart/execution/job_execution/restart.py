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
from dataclasses import dataclass, field
from typing import Optional

from .logs import rotate_logs

logger = logging.getLogger(__name__)

STEP_DELETE = "delete"
STEP_LOGS = "clear-logs"
STEP_RUN = "run"


@dataclass
class StepResult:
    """Outcome of a single restart step."""
    name: str
    command: list[str]
    returncode: Optional[int] = 0
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self):
        return self.returncode == 0

    @property
    def executed(self):
        return self.returncode is not None


@dataclass
class RestartReport:
    job_name: str
    dry_run: bool = False
    steps: list[StepResult] = field(default_factory=list)

    def step(self, name):
        for step in self.steps:
            if step.name == name:
                return step
        return None

    @property
    def exit_code(self):
        """Return code of the last step, the job creation call."""
        if not self.steps or self.steps[-1].returncode is None:
            return 0
        return self.steps[-1].returncode


class JobRestarter:
    """Restarts one named job: delete it, clear its logs, submit it again.

    The steps always run in this order and each outcome is recorded but
    never acted upon, so a failing delete (for example because the job does
    not exist) does not prevent the new submission.
    """

    def __init__(self, job_config, scheduler, dry_run=False):
        if job_config is None:
            raise ValueError("Job config must be provided to JobRestarter")
        if scheduler is None:
            raise ValueError("Scheduler must be provided to JobRestarter")
        self.job_config = job_config
        self.scheduler = scheduler
        self.dry_run = dry_run

    def delete_job(self) -> StepResult:
        name = self.job_config.name
        cmd = self.scheduler.delete_command(name)
        if self.dry_run:
            logger.info(f"[dry-run] {shlex.join(cmd)}")
            return StepResult(STEP_DELETE, cmd, returncode=None)

        logger.info(f"Deleting job '{name}'")
        result = self.scheduler.delete_job(name)
        return StepResult(STEP_DELETE, cmd, result.returncode, result.stdout or "", result.stderr or "")

    def clear_logs(self) -> StepResult:
        logs = self.job_config.logs
        logger.info(f"Clearing logs of job '{self.job_config.name}' (mode: {logs.mode})")
        rotation = rotate_logs(logs, dry_run=self.dry_run)
        if self.dry_run:
            for action in rotation.actions:
                logger.info(f"[dry-run] {action}")
            return StepResult(STEP_LOGS, rotation.actions, returncode=None)

        return StepResult(STEP_LOGS, rotation.actions,
                          returncode=0 if rotation.ok else 1,
                          stderr="\n".join(rotation.errors))

    def submit_job(self) -> StepResult:
        cmd = self.scheduler.run_command(self.job_config)
        if self.dry_run:
            logger.info(f"[dry-run] {shlex.join(cmd)}")
            return StepResult(STEP_RUN, cmd, returncode=None)

        logger.info(f"Starting job '{self.job_config.name}' with image {self.job_config.image}")
        result = self.scheduler.run_job(self.job_config)
        return StepResult(STEP_RUN, cmd, result.returncode, result.stdout or "", result.stderr or "")

    def restart(self) -> RestartReport:
        report = RestartReport(job_name=self.job_config.name, dry_run=self.dry_run)
        report.steps.append(self.delete_job())
        report.steps.append(self.clear_logs())
        report.steps.append(self.submit_job())

        failed = [step.name for step in report.steps if step.executed and not step.ok]
        if failed:
            logger.warning(f"Restart of job '{report.job_name}' finished with failed steps: {', '.join(failed)}")
        elif not self.dry_run:
            logger.info(f"Restart of job '{report.job_name}' submitted")
        return report
