import logging
import os
import subprocess

import pytest

from jobrestart.common import JobConfig, LogConfig, save_job_config
from jobrestart.common.logging_config import LevelFormatter
from jobrestart.execution.scheduler_config import ToolforgeScheduler


class RecordingScheduler(ToolforgeScheduler):
    """Toolforge backend that records commands instead of running them.

    For every call the existence of ``watch_paths`` is captured, so tests can
    check the state of the log files at the moment the job is submitted.
    """

    def __init__(self, returncodes=None, watch_paths=()):
        self.returncodes = returncodes or {}
        self.watch_paths = list(watch_paths)
        self.calls = []
        self.snapshots = []

    def execute(self, cmd):
        self.calls.append(list(cmd))
        self.snapshots.append({path: os.path.exists(path) for path in self.watch_paths})
        action = cmd[2]
        return subprocess.CompletedProcess(cmd, self.returncodes.get(action, 0), stdout="", stderr="")


@pytest.fixture
def job_config(tmp_path):
    return JobConfig(name="testbot",
                     logs=LogConfig(stdout=str(tmp_path / "testbot.out"),
                                    stderr=str(tmp_path / "testbot.err")))


@pytest.fixture
def config_file(tmp_path, job_config):
    path = tmp_path / "job.yaml"
    save_job_config(job_config, str(path))
    return str(path)


@pytest.fixture
def recording_scheduler(job_config):
    return RecordingScheduler(watch_paths=job_config.logs.live_paths())


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, LevelFormatter):
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def make_scheduler():
    return RecordingScheduler
