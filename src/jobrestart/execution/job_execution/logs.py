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

"""Clearing of job log files before a new job is started.

Two modes exist:

* ``remove`` deletes the live log files, plus any file matching the
  extra ``clear`` glob patterns.
* ``backup`` touches each live log file into existence and renames it to
  ``<path><backup_suffix>``, replacing an older backup.

Either way the live log paths are absent afterwards.
"""

import glob
import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class LogRotation:
    actions: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self):
        return not self.errors


def removal_targets(logs):
    """Paths the ``remove`` mode deletes, live logs first."""
    targets = []
    for path in logs.live_paths():
        if path not in targets:
            targets.append(path)
    for pattern in logs.clear:
        for path in sorted(glob.glob(os.path.expanduser(pattern))):
            if path not in targets:
                targets.append(path)
    return targets


def backup_path(path, suffix):
    return f"{path}{suffix}"


def remove_logs(logs, dry_run=False):
    rotation = LogRotation()
    for path in removal_targets(logs):
        if dry_run:
            rotation.actions.append(f"remove {path}")
            continue
        try:
            os.remove(path)
        except FileNotFoundError:
            logger.debug(f"Log file {path} does not exist, nothing to remove")
            continue
        except OSError as e:
            logger.error(f"Failed to remove log file {path}: {e}")
            rotation.errors.append(f"{path}: {e}")
            continue
        logger.debug(f"Removed log file {path}")
        rotation.actions.append(f"remove {path}")
    return rotation


def backup_logs(logs, dry_run=False):
    rotation = LogRotation()
    for path in logs.live_paths():
        target = backup_path(path, logs.backup_suffix)
        if dry_run:
            rotation.actions.append(f"backup {path} -> {target}")
            continue
        try:
            # the live path must exist for the rename
            with open(path, 'a'):
                pass
            os.replace(path, target)
        except OSError as e:
            logger.error(f"Failed to back up log file {path}: {e}")
            rotation.errors.append(f"{path}: {e}")
            continue
        logger.debug(f"Moved log file {path} to {target}")
        rotation.actions.append(f"backup {path} -> {target}")
    return rotation


def rotate_logs(logs, dry_run=False):
    """Clear the live log paths of a job according to ``logs.mode``.

    Args:
        logs: LogConfig of the job
        dry_run: Only record what would be done

    Returns:
        LogRotation listing the actions taken and the failures, if any
    """
    if logs.mode == 'backup':
        return backup_logs(logs, dry_run=dry_run)
    return remove_logs(logs, dry_run=dry_run)
