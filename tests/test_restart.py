import os
import shlex

import pytest

from jobrestart.common import JobConfig
from jobrestart.execution.job_execution import JobRestarter


def _write_logs(job_config, content="previous run\n"):
    for path in job_config.logs.live_paths():
        with open(path, "w") as f:
            f.write(content)


class TestRestartSequence:

    def test_delete_then_run(self, job_config, recording_scheduler):
        report = JobRestarter(job_config, recording_scheduler).restart()

        actions = [call[:3] for call in recording_scheduler.calls]
        assert actions == [["toolforge", "jobs", "delete"], ["toolforge", "jobs", "run"]]
        assert recording_scheduler.calls[0][-1] == "testbot"
        assert recording_scheduler.calls[1][-1] == "testbot"
        assert [step.name for step in report.steps] == ["delete", "clear-logs", "run"]
        assert report.exit_code == 0

    def test_logs_cleared_before_run(self, job_config, recording_scheduler):
        _write_logs(job_config)

        JobRestarter(job_config, recording_scheduler).restart()

        at_delete, at_run = recording_scheduler.snapshots
        assert all(at_delete.values())
        assert not any(at_run.values())

    def test_backup_keeps_previous_content(self, job_config, recording_scheduler):
        job_config.logs.mode = "backup"
        _write_logs(job_config)

        JobRestarter(job_config, recording_scheduler).restart()

        assert not any(recording_scheduler.snapshots[-1].values())
        for path in job_config.logs.live_paths():
            with open(path + ".bak") as f:
                assert f.read() == "previous run\n"

    def test_missing_job_does_not_stop_run(self, job_config, make_scheduler):
        scheduler = make_scheduler(returncodes={"delete": 1})

        report = JobRestarter(job_config, scheduler).restart()

        assert len(scheduler.calls) == 2
        assert not report.step("delete").ok
        assert report.step("run").ok
        assert report.exit_code == 0

    def test_exit_code_is_run_returncode(self, job_config, make_scheduler):
        scheduler = make_scheduler(returncodes={"run": 3})
        report = JobRestarter(job_config, scheduler).restart()
        assert report.exit_code == 3

    def test_log_failure_does_not_stop_run(self, job_config, recording_scheduler):
        os.mkdir(job_config.logs.stdout)

        report = JobRestarter(job_config, recording_scheduler).restart()

        assert not report.step("clear-logs").ok
        assert job_config.logs.stdout in report.step("clear-logs").stderr
        assert len(recording_scheduler.calls) == 2

    def test_twice_in_succession(self, job_config, recording_scheduler):
        restarter = JobRestarter(job_config, recording_scheduler)
        restarter.restart()
        _write_logs(job_config)
        restarter.restart()

        assert [call[2] for call in recording_scheduler.calls] == ["delete", "run", "delete", "run"]
        assert recording_scheduler.calls[1] == recording_scheduler.calls[3]
        assert recording_scheduler.calls[0] == recording_scheduler.calls[2]
        assert not any(recording_scheduler.snapshots[-1].values())


class TestStartupCommand:

    def test_single_config_file_argument(self, job_config, recording_scheduler):
        JobRestarter(job_config, recording_scheduler).restart()
        run = recording_scheduler.calls[-1]

        command = run[run.index("--command") + 1]
        shell, flag, invocation = shlex.split(command)
        assert (shell, flag) == ("sh", "-c")
        argv = shlex.split(invocation)
        assert argv == ["target/release/wdrc_rs", "bot", "/data/project/wdrc/wdrc_rs/config.json"]
        assert argv.count(job_config.command.config_file) == 1

    def test_log_redirection(self, job_config, recording_scheduler):
        JobRestarter(job_config, recording_scheduler).restart()
        run = recording_scheduler.calls[-1]

        assert run[run.index("-o") + 1] == job_config.logs.stdout
        assert run[run.index("-e") + 1] == job_config.logs.stderr


class TestDryRun:

    def test_nothing_is_executed(self, job_config, recording_scheduler):
        _write_logs(job_config)

        report = JobRestarter(job_config, recording_scheduler, dry_run=True).restart()

        assert recording_scheduler.calls == []
        assert all(os.path.exists(path) for path in job_config.logs.live_paths())
        assert report.dry_run
        assert not any(step.executed for step in report.steps)
        assert report.exit_code == 0
        assert report.step("run").command[:3] == ["toolforge", "jobs", "run"]


def test_requires_config_and_scheduler(recording_scheduler):
    with pytest.raises(ValueError):
        JobRestarter(None, recording_scheduler)
    with pytest.raises(ValueError):
        JobRestarter(JobConfig(), None)
