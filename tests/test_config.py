"""
test_config.py - Tests for run options and environment settings
"""

from pathlib import Path

import pytest
from dotenv import load_dotenv

from template_updater import config
from template_updater.config import RunOptions, Settings, load_settings


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in (
        "TEMPLATE_REMOTE_NAME",
        "TEMPLATE_UPSTREAM_BRANCH",
        "TEMPLATE_PACKAGE_MANAGER",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env out of the tests
    monkeypatch.setattr(config, "_load_env_file", lambda: None)
    monkeypatch.chdir(tmp_path)


class TestRunOptions:
    def test_defaults(self):
        options = RunOptions()

        assert options.ignore_all_space is False
        assert options.rename_threshold is None
        assert options.cherry_pick_options().strategy_options() == ()

    def test_threshold_bounds_are_inclusive(self):
        assert RunOptions(rename_threshold=0).rename_threshold == 0
        assert RunOptions(rename_threshold=100).rename_threshold == 100


class TestSettings:
    def test_upstream_ref(self):
        assert Settings().upstream_ref == "upstream-template/master"
        assert Settings(remote_name="tmpl", upstream_branch="main").upstream_ref == "tmpl/main"

    def test_rejects_remote_name_with_spaces(self):
        with pytest.raises(ValueError):
            Settings(remote_name="my remote")

    def test_rejects_empty_branch(self):
        with pytest.raises(ValueError):
            Settings(upstream_branch="")


class TestLoadSettings:
    def test_defaults_without_environment(self, clean_env):
        assert load_settings() == Settings()

    def test_reads_environment(self, clean_env, monkeypatch):
        monkeypatch.setenv("TEMPLATE_REMOTE_NAME", "tmpl")
        monkeypatch.setenv("TEMPLATE_UPSTREAM_BRANCH", "main")
        monkeypatch.setenv("TEMPLATE_PACKAGE_MANAGER", "NPM")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = load_settings()

        assert settings == Settings(
            remote_name="tmpl",
            upstream_branch="main",
            package_manager="npm",
            log_level="DEBUG",
        )

    def test_reads_dotenv_file(self, clean_env, monkeypatch, tmp_path):
        # Registered so teardown removes the value load_dotenv sets
        monkeypatch.setenv("TEMPLATE_UPSTREAM_BRANCH", "placeholder")
        monkeypatch.delenv("TEMPLATE_UPSTREAM_BRANCH")
        env_file = tmp_path / ".env"
        env_file.write_text("TEMPLATE_UPSTREAM_BRANCH=develop\n")
        monkeypatch.setattr(config, "_load_env_file", lambda: load_dotenv(env_file))

        assert load_settings().upstream_branch == "develop"

    def test_env_file_lookup_falls_back_to_cwd(self, monkeypatch):
        calls = []
        monkeypatch.setattr(config, "load_dotenv", lambda *args: calls.append(args))

        config._load_env_file()

        project_env = Path(config.__file__).parent.parent / ".env"
        expected = [(project_env,)] if project_env.exists() else [()]
        assert calls == expected
