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

"""Logging configuration for jobrestart."""

import logging
import sys

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LevelFormatter(logging.Formatter):
    """Formatter that shows different formats based on log level."""

    # Format for DEBUG level (verbose)
    debug_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    # Format for INFO level (clean)
    info_format = '%(message)s'
    # Format for WARNING and above (show level)
    warning_format = '%(levelname)s: %(message)s'

    def __init__(self):
        super().__init__()
        self._debug = logging.Formatter(self.debug_format, datefmt='%Y-%m-%d %H:%M:%S')
        self._info = logging.Formatter(self.info_format)
        self._warning = logging.Formatter(self.warning_format)

    def format(self, record):
        if record.levelno <= logging.DEBUG:
            return self._debug.format(record)
        if record.levelno == logging.INFO:
            return self._info.format(record)
        return self._warning.format(record)


def setup_logging(log_level: str = "INFO", stream=None) -> None:
    """Configure logging for jobrestart.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream: Stream to log to, defaults to the current ``sys.stderr``
    """
    numeric_level = getattr(logging, str(log_level).upper(), logging.INFO)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(LevelFormatter())

    # force=True so repeated CLI invocations in one process pick up the new stream
    logging.basicConfig(
        level=numeric_level,
        handlers=[handler],
        force=True
    )


def setup_logging_from_project_config() -> None:
    """Setup logging using the project configuration if available.

    If no project configuration is found, defaults to INFO level.
    """
    from .cli.project_config import ProjectConfig

    config = ProjectConfig.load()
    if config and config.log_level:
        setup_logging(config.log_level)
    else:
        setup_logging("INFO")
