import io
import logging
import os

import click
import pytest

from jobrestart.common.cli.project_config import (PROJECT_FILE, ProjectConfig,
                                                  get_project_config)
from jobrestart.common.logging_config import (setup_logging,
                                              setup_logging_from_project_config)


class TestProjectConfig:

    def test_save_stores_relative_config_path(self, tmp_path):
        config = tmp_path / "job.yaml"
        config.write_text("settings: {}\n")

        project_file = ProjectConfig(config_path=str(config), scheduler="toolforge").save(str(tmp_path))

        assert os.path.basename(project_file) == PROJECT_FILE
        loaded = ProjectConfig.load(str(tmp_path))
        assert loaded.config_path == str(config)
        assert loaded.scheduler == "toolforge"
        assert loaded.log_level == "INFO"

    def test_found_from_subdirectory(self, tmp_path):
        ProjectConfig().save(str(tmp_path))
        subdir = tmp_path / "a" / "b"
        subdir.mkdir(parents=True)

        assert ProjectConfig.find_project_file(str(subdir)) == str(tmp_path / PROJECT_FILE)

    def test_unreadable_project_file(self, tmp_path):
        (tmp_path / PROJECT_FILE).write_text("{not json")
        assert ProjectConfig.load(str(tmp_path)) is None

    def test_validate_missing_config(self, tmp_path):
        is_valid, error = ProjectConfig(config_path=str(tmp_path / "gone.yaml")).validate()
        assert not is_valid
        assert "does not exist" in error

    def test_validate_builtin(self):
        assert ProjectConfig().validate() == (True, None)

    def test_get_project_config_not_initialized(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(click.ClickException, match="Project not initialized"):
            get_project_config()


class TestLogging:

    def test_level_dependent_format(self):
        stream = io.StringIO()
        setup_logging("INFO", stream=stream)
        logger = logging.getLogger("jobrestart.test")

        logger.debug("hidden")
        logger.info("plain message")
        logger.warning("careful")

        assert stream.getvalue() == "plain message\nWARNING: careful\n"

    def test_debug_format(self):
        stream = io.StringIO()
        setup_logging("debug", stream=stream)
        logging.getLogger("jobrestart.test").debug("details")

        assert " - jobrestart.test - DEBUG - details" in stream.getvalue()

    def test_level_from_project_file(self, tmp_path, monkeypatch):
        ProjectConfig(log_level="WARNING").save(str(tmp_path))
        monkeypatch.chdir(tmp_path)

        setup_logging_from_project_config()

        assert logging.getLogger().level == logging.WARNING
