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

import math
import os
import re
import shlex
from typing import Literal, Optional

from pydantic import (BaseModel, ConfigDict, Field, ValidationError,
                      field_validator, model_validator)

JOB_NAME_PATTERN = re.compile(r'^[a-z0-9]([-a-z0-9]*[a-z0-9])?$')
MEMORY_PATTERN = re.compile(r'^[1-9][0-9]*(Ki|Mi|Gi|Ti|K|M|G|T)$')


class CommandConfig(BaseModel):
    """Startup command of the job: one binary invoked with a single config file."""
    model_config = ConfigDict(extra='forbid')

    shell: Optional[str] = "sh -c"
    binary: str = "target/release/wdrc_rs"
    args: list[str] = ["bot"]
    config_file: str = "/data/project/wdrc/wdrc_rs/config.json"

    @field_validator('binary', 'config_file')
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('must not be empty')
        return v

    @field_validator('args')
    @classmethod
    def validate_single_words(cls, v: list[str]) -> list[str]:
        for arg in v:
            if not arg or any(c.isspace() for c in arg):
                raise ValueError(f'argument {arg!r} must be a single non-empty word')
        return v

    def to_command_line(self) -> str:
        """Build the command string handed to the scheduler.

        With the defaults this yields
        ``sh -c 'target/release/wdrc_rs bot /data/project/wdrc/wdrc_rs/config.json'``.
        """
        invocation = shlex.join([self.binary, *self.args, self.config_file])
        if not self.shell:
            return invocation
        return f"{self.shell} {shlex.quote(invocation)}"


class LogConfig(BaseModel):
    model_config = ConfigDict(extra='forbid')

    stdout: str = "/data/project/wdrc/rustbot.out"
    stderr: str = "/data/project/wdrc/rustbot.err"
    mode: Literal['remove', 'backup'] = 'remove'
    backup_suffix: str = ".bak"
    clear: list[str] = []

    @field_validator('stdout', 'stderr')
    @classmethod
    def validate_absolute(cls, v: str) -> str:
        if not os.path.isabs(v):
            raise ValueError(f'log path {v} must be absolute')
        return v

    @field_validator('backup_suffix')
    @classmethod
    def validate_suffix(cls, v: str) -> str:
        if not v or '/' in v:
            raise ValueError('backup suffix must be non-empty and must not contain "/"')
        return v

    @model_validator(mode='after')
    def validate_distinct_paths(self):
        if os.path.normpath(self.stdout) == os.path.normpath(self.stderr):
            raise ValueError('stdout and stderr log paths must differ')
        if self.mode == 'backup':
            for path in self.live_paths():
                for other in self.live_paths():
                    if os.path.normpath(path) == os.path.normpath(other + self.backup_suffix):
                        raise ValueError(f'log path {path} is the backup path of {other}')
        return self

    def live_paths(self) -> list[str]:
        return [self.stdout, self.stderr]


class JobConfig(BaseModel):
    model_config = ConfigDict(extra='forbid')

    name: str = "rustbot"
    memory: str = "2000Mi"
    cpu: int | float | str = 1
    continuous: bool = True
    mount: Literal['all', 'none'] = 'all'
    image: str = "tool-wdrc/tool-wdrc:latest"
    command: CommandConfig = Field(default_factory=CommandConfig)
    filelog: bool = True
    logs: LogConfig = Field(default_factory=LogConfig)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not JOB_NAME_PATTERN.match(v):
            raise ValueError(f'name {v} must be lowercase alphanumerics or "-", '
                             'starting and ending with an alphanumeric character')
        return v

    @field_validator('memory')
    @classmethod
    def validate_memory(cls, v: str) -> str:
        if not MEMORY_PATTERN.match(v):
            raise ValueError(f'memory {v} must look like 2000Mi or 2Gi')
        return v

    @field_validator('cpu', mode='before')
    @classmethod
    def validate_cpu(cls, v):
        if isinstance(v, bool):
            raise ValueError(f'cpu {v} must be a number')
        if isinstance(v, str):
            v = v.strip()
        try:
            value = float(v)
        except (TypeError, ValueError):
            raise ValueError(f'cpu {v} must be a number') from None
        if not math.isfinite(value):
            raise ValueError(f'cpu {v} must be a finite number')
        if value <= 0:
            raise ValueError(f'cpu {v} must be positive')
        return v

    @field_validator('image')
    @classmethod
    def validate_image(cls, v: str) -> str:
        if not v or any(c.isspace() for c in v):
            raise ValueError(f'image {v!r} must be a non-empty reference without whitespace')
        return v


class ConfigV1(BaseModel):
    model_config = ConfigDict(extra='forbid')
    version: int = 1
    job: JobConfig = Field(default_factory=JobConfig)


def validate_config(config: dict):
    """
    Validate the configuration settings.

    Args:
        config: The settings dictionary to validate
    Raises:
        ValueError: If the version is unsupported or a field is invalid
    """
    version = config.get("version", None)
    if version != 1:
        raise ValueError(f"Unsupported config version: {version}")
    return get_validated_config(config, ConfigV1)


def get_validated_config(config: dict, config_class):
    try:
        config = config_class(**config)
    except Exception as e:
        if isinstance(e, ValidationError):
            errors = []
            for error in e.errors():  # pylint: disable=no-member
                field = ".".join(str(loc) for loc in error['loc'])
                msg = error['msg']
                errors.append(f"  - {field}: {msg}")
            raise ValueError("Config validation failed:\n" + "\n".join(errors)) from None
        raise ValueError(f"Config validation failed: {str(e)}") from None
    return config
