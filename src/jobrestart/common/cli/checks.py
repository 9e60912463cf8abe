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

"""Environment checks for the jobrestart CLI."""

from jobrestart.common import load_job_config


def check_config(config_path):
    """Check that a job configuration file can be loaded.

    Returns:
        tuple: (bool, str) - (success, message)
    """
    try:
        job = load_job_config(config_path)
    except (ValueError, FileNotFoundError) as e:
        return False, f"Failed to load configuration file: {str(e)}"

    source = config_path or "built-in definition"
    return True, f"Job '{job.name}' loaded from {source}"


def check_scheduler_access(scheduler):
    """Check if the scheduler backend is reachable.

    Returns:
        tuple: (bool, str) - (success, message)
            - success: True if the scheduler is accessible, False otherwise
            - message: Success message or error description
    """
    try:
        return scheduler.check_access()
    except Exception as e:  # pylint: disable=broad-except
        return False, f"Failed to check scheduler access: {str(e)}"
