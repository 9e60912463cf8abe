import os
import shlex
import stat

from jobrestart.common import JobConfig, LogConfig
from jobrestart.execution.job_execution import (render_restart_script,
                                                write_restart_script)
from jobrestart.execution.job_execution.script import (format_command,
                                                       quote_argument)
from jobrestart.execution.scheduler_config import ToolforgeScheduler

RUSTBOT_SCRIPT = """#!/bin/bash
# Restart the 'rustbot' job: delete it, clear its logs, start it again.
toolforge jobs delete rustbot
rm -f /data/project/wdrc/rustbot.out /data/project/wdrc/rustbot.err
toolforge jobs run --mem 2000Mi --cpu 1 --continuous --mount=all \\
\t--image tool-wdrc/tool-wdrc:latest \\
\t--command "sh -c 'target/release/wdrc_rs bot /data/project/wdrc/wdrc_rs/config.json'" \\
\t--filelog -o /data/project/wdrc/rustbot.out -e /data/project/wdrc/rustbot.err \\
\trustbot
"""


def test_builtin_job_script():
    assert render_restart_script(JobConfig(), ToolforgeScheduler()) == RUSTBOT_SCRIPT


def test_clear_patterns_stay_unquoted():
    job = JobConfig(logs=LogConfig(clear=["~/rustbot.*"]))
    script = render_restart_script(job, ToolforgeScheduler())
    assert "rm -f /data/project/wdrc/rustbot.out /data/project/wdrc/rustbot.err ~/rustbot.*\n" in script


def test_backup_mode_script():
    job = JobConfig(logs=LogConfig(mode="backup", backup_suffix=".old"))
    script = render_restart_script(job, ToolforgeScheduler())
    assert ("touch /data/project/wdrc/rustbot.out && "
            "mv -f /data/project/wdrc/rustbot.out /data/project/wdrc/rustbot.out.old") in script
    assert "rm -f" not in script


def test_quote_argument():
    assert quote_argument("rustbot") == "rustbot"
    assert quote_argument("two words") == "'two words'"
    assert quote_argument("sh -c 'run it'") == "\"sh -c 'run it'\""
    # double quotes would expand the variable
    assert quote_argument("sh -c 'echo $HOME'") == shlex.quote("sh -c 'echo $HOME'")


def test_format_command_without_breaks():
    assert format_command(["toolforge", "jobs", "delete", "bot"]) == "toolforge jobs delete bot"


def test_write_restart_script(tmp_path):
    path = write_restart_script(str(tmp_path / "scripts" / "restart.sh"), JobConfig(), ToolforgeScheduler())

    with open(path) as f:
        assert f.read() == RUSTBOT_SCRIPT
    assert os.stat(path).st_mode & stat.S_IXUSR
