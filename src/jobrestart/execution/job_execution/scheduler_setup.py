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

"""Lookup of scheduler backends."""

import logging
from importlib.metadata import entry_points

from ..scheduler_config import ToolforgeScheduler

logger = logging.getLogger(__name__)

BUILTIN_SCHEDULERS = {
    "toolforge": ToolforgeScheduler,
}


def load_scheduler_plugins():
    """Load all available scheduler backends.

    Built-in backends are always present; entry points of the
    ``jobrestart.schedulers`` group may add or override them.

    Returns:
        dict: Dictionary mapping backend names to their class objects
    """
    plugins = dict(BUILTIN_SCHEDULERS)
    try:
        eps = entry_points(group='jobrestart.schedulers')
        for ep in eps:
            try:
                plugins[ep.name] = ep.load()
            except Exception as e:
                logger.warning(f"Failed to load scheduler plugin '{ep.name}': {e}")
    except Exception as e:
        logger.warning(f"Failed to load scheduler plugins: {e}")

    return plugins


def get_scheduler(name):
    """Get a scheduler backend instance by name.

    Raises:
        ValueError: If name is not found in available backends
    """
    plugins = load_scheduler_plugins()

    if name not in plugins:
        available = ", ".join(sorted(plugins.keys()))
        raise ValueError(
            f"Scheduler '{name}' not found. "
            f"Available schedulers: {available}"
        )

    return plugins[name]()
