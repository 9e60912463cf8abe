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

"""Project configuration management for the jobrestart CLI."""

import json
import os
from pathlib import Path
from typing import Optional

import click

PROJECT_FILE = ".jobrestart_project"
DEFAULT_SCHEDULER = "toolforge"


class ProjectConfig:
    """Manages the project settings stored in a .jobrestart_project file."""

    def __init__(self, config_path: Optional[str] = None,
                 scheduler: str = DEFAULT_SCHEDULER,
                 log_level: str = "INFO"):
        """Initialize project configuration.

        Args:
            config_path: Path to the job configuration file, None for the built-in job
            scheduler: Name of the scheduler backend
            log_level: Default logging level of the CLI
        """
        self.config_path = config_path
        self.scheduler = scheduler
        self.log_level = log_level

    @classmethod
    def find_project_file(cls, start_dir: Optional[str] = None) -> Optional[str]:
        """Find .jobrestart_project file by searching upward from start_dir.

        Args:
            start_dir: Directory to start searching from (defaults to current directory)

        Returns:
            Path to .jobrestart_project file if found, None otherwise
        """
        if start_dir is None:
            start_dir = os.getcwd()

        current = Path(start_dir).resolve()

        while True:
            project_file = current / PROJECT_FILE
            if project_file.exists():
                return str(project_file)

            parent = current.parent
            if parent == current:  # Reached root
                break
            current = parent

        return None

    @classmethod
    def load(cls, start_dir: Optional[str] = None) -> Optional['ProjectConfig']:
        """Load project configuration from .jobrestart_project file.

        Args:
            start_dir: Directory to start searching from (defaults to current directory)

        Returns:
            ProjectConfig instance if found and readable, None otherwise
        """
        project_file = cls.find_project_file(start_dir)
        if not project_file:
            return None

        try:
            with open(project_file, 'r') as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError):
            return None

        if not isinstance(data, dict):
            return None

        config_path = data.get('config')
        if config_path and not os.path.isabs(config_path):
            # Relative to the project file location
            project_dir = os.path.dirname(project_file)
            config_path = os.path.abspath(os.path.join(project_dir, config_path))

        return cls(config_path=config_path or None,
                   scheduler=data.get('scheduler') or DEFAULT_SCHEDULER,
                   log_level=data.get('log_level') or "INFO")

    def save(self, target_dir: Optional[str] = None) -> str:
        """Save project configuration to .jobrestart_project file.

        Args:
            target_dir: Directory to save .jobrestart_project file (defaults to current directory)

        Returns:
            Path to saved .jobrestart_project file
        """
        if target_dir is None:
            target_dir = os.getcwd()

        project_file = os.path.join(target_dir, PROJECT_FILE)
        target_path = Path(target_dir).resolve()

        config_to_save = self.config_path
        if self.config_path:
            # Store relative paths for portability when possible
            config_path_obj = Path(self.config_path).resolve()
            if config_path_obj.is_relative_to(target_path):
                config_to_save = str(config_path_obj.relative_to(target_path))

        data = {
            'config': config_to_save,
            'scheduler': self.scheduler,
            'log_level': self.log_level
        }

        with open(project_file, 'w') as f:
            json.dump(data, f, indent=2)

        return project_file

    def validate(self) -> tuple[bool, Optional[str]]:
        """Validate that the configuration is valid.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if not self.scheduler:
            return False, "Scheduler is not set"

        if self.config_path:
            if not os.path.exists(self.config_path):
                return False, f"Configuration file does not exist: {self.config_path}"

            if not os.path.isfile(self.config_path):
                return False, f"Configuration path is not a file: {self.config_path}"

        return True, None


def get_project_config() -> ProjectConfig:
    """Get project configuration or raise an error if not found.

    Returns:
        ProjectConfig instance

    Raises:
        click.ClickException: If project is not initialized or configuration is invalid
    """

    config = ProjectConfig.load()
    if not config:
        raise click.ClickException(
            "Project not initialized. Run 'jobrestart init [config-file]' first."
        )

    is_valid, error = config.validate()
    if not is_valid:
        raise click.ClickException(f"Invalid project configuration: {error}")

    return config
