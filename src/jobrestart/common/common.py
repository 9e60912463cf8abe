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
import os

import yaml

from .config import JobConfig, validate_config

logger = logging.getLogger(__name__)


def load_config(config_file, subsection=None):
    """Load and validate a job configuration file."""
    if not config_file:
        raise ValueError("No config file provided")

    if not os.path.exists(config_file):
        raise FileNotFoundError(f"Config file {config_file} not found")

    with open(config_file, 'r') as f:
        try:
            # Load all documents, the first one contains the settings
            documents = list(yaml.safe_load_all(f))
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing YAML file {config_file}: {e}") from e

    if not documents or not isinstance(documents[0], dict):
        raise ValueError(f"No documents found in config file {config_file}")

    if 'settings' not in documents[0]:
        raise ValueError("No 'settings' section found in config file")

    settings = documents[0]['settings'] or {}
    if not isinstance(settings, dict):
        raise ValueError("The 'settings' section must be a mapping")

    config = validate_config(settings)
    if subsection:
        section = getattr(config, subsection, None)
        if section is None:
            raise ValueError(f"No subsection '{subsection}' found in settings")
        return section
    return config


def load_job_config(config_file=None) -> JobConfig:
    """Return the job definition from ``config_file``, or the built-in one."""
    if not config_file:
        logger.debug("No config file given, using built-in job definition")
        return JobConfig()
    logger.debug(f"Loading job definition from {config_file}")
    return load_config(config_file, subsection="job")


def dump_job_config(job: JobConfig) -> str:
    """Serialize a job definition into the config file layout."""
    data = {
        'settings': {
            'version': 1,
            'job': job.model_dump(),
        }
    }
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)


def save_job_config(job: JobConfig, output_file):
    output_dir = os.path.dirname(output_file)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    with open(output_file, 'w') as f:
        f.write(dump_job_config(job))
