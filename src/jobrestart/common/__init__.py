#!/usr/bin/env python3

from .common import dump_job_config, load_config, load_job_config, save_job_config
from .config import (CommandConfig, ConfigV1, JobConfig, LogConfig,
                     get_validated_config, validate_config)

__all__ = [
    'load_config',
    'load_job_config',
    'dump_job_config',
    'save_job_config',
    'CommandConfig',
    'ConfigV1',
    'JobConfig',
    'LogConfig',
    'get_validated_config',
    'validate_config',
]
