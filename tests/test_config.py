"""Tests for settings and pipeline definitions."""

# Standard library imports
import json
from pathlib import Path

# Third-party imports
import pytest

# Local/package imports
from release_executor.config import (
    BUILTIN_PIPELINES,
    PipelinesConfiguration,
    Settings,
    load_environment_variables,
)
from release_executor.execution import FailurePolicy
from release_executor.exceptions import (
    ConfigurationError,
    PipelineNotFoundError,
    ValidationError,
)


@pytest.fixture
def write_config(tmp_path):
    """Write a pipelines JSON file and return its path."""

    def _write(content):
        path = tmp_path / "pipelines.json"
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_text(json.dumps(content), encoding="utf-8")
        return path

    return _write


def test_default_settings():
    settings = Settings()

    assert settings.debug is False
    assert settings.log_dir is None
    assert settings.config is None
    assert settings.working_dir is None
    assert settings.failure_policy == "abort"
    assert settings.step_timeout is None
    assert settings.echo_output is True


def test_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("RELEASE_EXECUTOR_DEBUG", "yes")
    monkeypatch.setenv("RELEASE_EXECUTOR_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("RELEASE_EXECUTOR_FAILURE_POLICY", "Continue  # keep going")
    monkeypatch.setenv("RELEASE_EXECUTOR_STEP_TIMEOUT", "90")
    monkeypatch.setenv("RELEASE_EXECUTOR_ECHO_OUTPUT", "false")

    settings = Settings()

    assert settings.debug is True
    assert settings.log_dir == tmp_path / "logs"
    assert settings.failure_policy == "continue"
    assert settings.step_timeout == 90.0
    assert settings.echo_output is False


def test_environment_overrides_constructor(monkeypatch):
    monkeypatch.setenv("RELEASE_EXECUTOR_FAILURE_POLICY", "abort")

    settings = Settings(failure_policy="continue")

    assert settings.failure_policy == "abort"


@pytest.mark.parametrize(
    "key, value",
    [
        ("RELEASE_EXECUTOR_STEP_TIMEOUT", "soon"),
        ("RELEASE_EXECUTOR_STEP_TIMEOUT", "-1"),
        ("RELEASE_EXECUTOR_FAILURE_POLICY", "retry"),
    ],
)
def test_invalid_environment_values(monkeypatch, key, value):
    monkeypatch.setenv(key, value)

    with pytest.raises(ConfigurationError):
        Settings()


def test_load_environment_variables(monkeypatch, tmp_path):
    monkeypatch.delenv("RELEASE_EXECUTOR_STEP_TIMEOUT", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("RELEASE_EXECUTOR_STEP_TIMEOUT=12\n", encoding="utf-8")

    assert load_environment_variables(env_file) is True
    assert Settings().step_timeout == 12.0


def test_load_environment_variables_missing_file(tmp_path):
    assert load_environment_variables(tmp_path / ".env") is False


def test_builtin_pipelines():
    config = PipelinesConfiguration()

    assert set(config.list_pipelines()) == set(BUILTIN_PIPELINES)
    assert config.get_pipeline("apibuilder-validation").steps == [
        "dev tag",
        "sbt +publish",
    ]
    assert config.get_pipeline("lib-apidoc-json-validation").steps == [
        "dev tag",
        "sbt publish",
    ]


def test_unknown_pipeline():
    with pytest.raises(PipelineNotFoundError) as exc_info:
        PipelinesConfiguration().get_pipeline("nope")

    assert exc_info.value.pipeline_name == "nope"
    assert "PIPELINE_NOT_FOUND" in str(exc_info.value)


def test_config_file_adds_and_overrides(write_config):
    path = write_config(
        {
            "docs": {
                "description": "Publish docs",
                "steps": ["make docs", "make upload"],
            },
            "apibuilder-validation": {"steps": ["dev tag"]},
        }
    )

    config = PipelinesConfiguration(path)

    assert config.get_pipeline("docs").steps == ["make docs", "make upload"]
    assert config.get_pipeline("docs").description == "Publish docs"
    assert config.get_pipeline("apibuilder-validation").steps == ["dev tag"]
    assert "lib-apidoc-json-validation" in config.list_pipelines()


def test_config_file_does_not_leak_into_builtins(write_config):
    PipelinesConfiguration(write_config({"apibuilder-validation": {"steps": []}}))

    assert BUILTIN_PIPELINES["apibuilder-validation"]["steps"] == [
        "dev tag",
        "sbt +publish",
    ]


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        PipelinesConfiguration(tmp_path / "absent.json")


def test_invalid_json(write_config):
    with pytest.raises(ConfigurationError, match="Invalid JSON"):
        PipelinesConfiguration(write_config("{not json"))


def test_config_must_be_object(write_config):
    with pytest.raises(ConfigurationError):
        PipelinesConfiguration(write_config(["dev tag"]))


@pytest.mark.parametrize(
    "definition",
    [
        "dev tag",
        {"description": "no steps"},
        {"steps": "dev tag"},
        {"steps": ["dev tag", 3]},
        {"steps": [], "description": 5},
    ],
)
def test_invalid_definitions(write_config, definition):
    with pytest.raises(ValidationError):
        PipelinesConfiguration(write_config({"broken": definition}))


def test_build_executor_preserves_order(recording_runner):
    executor = PipelinesConfiguration().build_executor(
        "apibuilder-validation", runner=recording_runner
    )

    assert executor.name == "apibuilder-validation"
    assert executor.steps == ("dev tag", "sbt +publish")

    executor.run()

    assert recording_runner.calls == ["dev tag", "sbt +publish"]


def test_definition_paths_accept_strings(write_config):
    path = write_config({"docs": {"steps": ["make docs"]}})

    config = PipelinesConfiguration(str(path))

    assert config.config_path == Path(path)


def test_settings_accept_failure_policy_enum():
    settings = Settings(failure_policy=FailurePolicy.CONTINUE)

    assert settings.failure_policy == "continue"
