"""Tests for job configuration from action inputs and YAML files."""

import pytest

from benchcompare.alert import Thresholds
from benchcompare.config import AlertConfig, config_from_job_input, create_config, load_config
from benchcompare.config.inputs import parse_float_prefix
from benchcompare.exceptions import ConfigError
from benchcompare.models import ToolType


@pytest.fixture
def output_files(tmp_path):
    pr_file = tmp_path / "pr.txt"
    base_file = tmp_path / "base.txt"
    pr_file.write_text("pr", encoding="utf-8")
    base_file.write_text("base", encoding="utf-8")
    return pr_file, base_file


@pytest.fixture
def job_inputs(output_files):
    pr_file, base_file = output_files
    return {
        "INPUT_NAME": "Benchmark",
        "INPUT_TOOL": "cargo",
        "INPUT_PR-BENCHMARK-FILE-PATH": str(pr_file),
        "INPUT_BASE-BENCHMARK-FILE-PATH": str(base_file),
        "INPUT_COMMENT-ALWAYS": "false",
        "INPUT_COMMENT-ON-ALERT": "false",
        "INPUT_FAIL-ON-ALERT": "false",
        "INPUT_ALERT-THRESHOLD": "200%",
        "INPUT_FAIL-THRESHOLD": "",
        "INPUT_ALERT-COMMENT-CC-USERS": "",
    }


class TestJobInputs:
    def test_valid_inputs(self, job_inputs, output_files):
        config = config_from_job_input(job_inputs)

        assert config.name == "Benchmark"
        assert config.tool == ToolType.CARGO
        assert config.pr_benchmark_file_path == output_files[0].resolve()
        assert config.base_benchmark_file_path == output_files[1].resolve()
        assert config.alert_threshold == 2.0
        assert config.fail_threshold == 2.0
        assert config.thresholds == Thresholds(2.0, 2.0)
        assert config.alert_comment_cc_users == []
        assert not config.fail_on_alert

    def test_missing_name_uses_default(self, job_inputs):
        del job_inputs["INPUT_NAME"]
        assert config_from_job_input(job_inputs).name == "Benchmark"

    @pytest.mark.parametrize("overrides, message", [
        ({"INPUT_NAME": ""}, "Name must not be empty"),
        (
            {"INPUT_TOOL": "foo"},
            "Invalid value 'foo' for 'tool' input. It must be one of cargo, go, benchmarkjs, pytest, googlecpp, catch2",
        ),
        (
            {"INPUT_ALERT-THRESHOLD": "2.0"},
            "'alert-threshold' input must ends with '%' for percentage value (e.g. '200%')",
        ),
        (
            {"INPUT_ALERT-THRESHOLD": "foo%"},
            "Specified value 'foo' in 'alert-threshold' input cannot be parsed as float number",
        ),
        ({"INPUT_ALERT-THRESHOLD": ""}, "'alert-threshold' input must not be empty"),
        (
            {"INPUT_FAIL-ON-ALERT": "yes"},
            "'fail-on-alert' input must be boolean value 'true' or 'false' but got 'yes'",
        ),
        (
            {"INPUT_ALERT-COMMENT-CC-USERS": "@foo,bar"},
            "User name in 'alert-comment-cc-users' input must start with '@' but got 'bar'",
        ),
        (
            {"INPUT_ALERT-THRESHOLD": "150%", "INPUT_FAIL-THRESHOLD": "120%"},
            "'alert-threshold' value must be smaller than 'fail-threshold' value but got 1.5 > 1.2",
        ),
    ])
    def test_invalid_inputs(self, job_inputs, overrides, message):
        job_inputs.update(overrides)

        with pytest.raises(ConfigError) as exc_info:
            config_from_job_input(job_inputs)

        assert str(exc_info.value) == message

    def test_comment_on_alert_requires_summary_file(self, job_inputs):
        job_inputs["INPUT_COMMENT-ON-ALERT"] = "true"

        with pytest.raises(ConfigError) as exc_info:
            config_from_job_input(job_inputs)

        assert str(exc_info.value).startswith("'comment-on-alert' is enabled but 'summary-file' is not set")
        assert exc_info.value.error_code == "CONFIG_007"

    def test_step_summary_variable_is_the_default_summary_file(self, job_inputs, tmp_path):
        job_inputs["INPUT_COMMENT-ALWAYS"] = "true"
        job_inputs["GITHUB_STEP_SUMMARY"] = str(tmp_path / "summary.md")

        config = config_from_job_input(job_inputs)

        assert config.comment_always
        assert config.summary_file == tmp_path / "summary.md"

    def test_cc_users_are_split_and_stripped(self, job_inputs):
        job_inputs["INPUT_ALERT-COMMENT-CC-USERS"] = " @foo , @bar,, "
        assert config_from_job_input(job_inputs).alert_comment_cc_users == ["@foo", "@bar"]

    def test_fail_threshold_is_kept(self, job_inputs):
        job_inputs["INPUT_FAIL-THRESHOLD"] = "350%"

        config = config_from_job_input(job_inputs)

        assert config.thresholds == Thresholds(alert_threshold=2.0, fail_threshold=3.5)

    def test_relative_paths_are_resolved(self, job_inputs, output_files, monkeypatch):
        monkeypatch.chdir(output_files[0].parent)
        job_inputs["INPUT_PR-BENCHMARK-FILE-PATH"] = "pr.txt"

        config = config_from_job_input(job_inputs)

        assert config.pr_benchmark_file_path == output_files[0].resolve()
        assert config.pr_benchmark_file_path.is_absolute()

    def test_missing_file(self, job_inputs, tmp_path):
        job_inputs["INPUT_PR-BENCHMARK-FILE-PATH"] = str(tmp_path / "nope.txt")

        with pytest.raises(ConfigError) as exc_info:
            config_from_job_input(job_inputs)

        assert str(exc_info.value).startswith("Invalid value for 'pr-benchmark-file-path' input: Cannot stat ")

    def test_directory_is_not_a_file(self, job_inputs, tmp_path):
        job_inputs["INPUT_BASE-BENCHMARK-FILE-PATH"] = str(tmp_path)

        with pytest.raises(ConfigError) as exc_info:
            config_from_job_input(job_inputs)

        assert str(exc_info.value) == (
            f"Invalid value for 'base-benchmark-file-path' input: Specified path '{tmp_path.resolve()}' is not a file"
        )

    def test_home_directory_is_expanded(self, job_inputs, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        job_inputs["INPUT_PR-BENCHMARK-FILE-PATH"] = "~/pr.txt"

        config = config_from_job_input(job_inputs)

        assert config.pr_benchmark_file_path == (tmp_path / "pr.txt").resolve()


@pytest.mark.parametrize("text, expected", [
    ("150", 150.0),
    ("150.5abc", 150.5),
    (" 1e2", 100.0),
    ("-20", -20.0),
    (".5", 0.5),
    ("abc", None),
    ("", None),
])
def test_parse_float_prefix(text, expected):
    assert parse_float_prefix(text) == expected


class TestAlertConfigModel:
    def test_unknown_field_is_rejected(self, output_files):
        with pytest.raises(ConfigError) as exc_info:
            create_config({
                "tool": "go",
                "pr_benchmark_file_path": output_files[0],
                "base_benchmark_file_path": output_files[1],
                "alert_threshold": 1.5,
                "github_tokn": "typo",
            })

        assert exc_info.value.error_code == "CONFIG_003"
        assert "Field 'github_tokn'" in str(exc_info.value)

    def test_negative_threshold_is_rejected(self, output_files):
        with pytest.raises(ConfigError) as exc_info:
            create_config({
                "tool": "go",
                "pr_benchmark_file_path": output_files[0],
                "base_benchmark_file_path": output_files[1],
                "alert_threshold": -1,
            })

        assert "Field 'alert_threshold'" in str(exc_info.value)

    def test_model_is_frozen(self, output_files):
        config = AlertConfig(
            tool="go",
            pr_benchmark_file_path=output_files[0],
            base_benchmark_file_path=output_files[1],
            alert_threshold=1.5,
        )

        assert config.fail_threshold == 1.5
        with pytest.raises(Exception):
            config.name = "changed"


class TestYamlConfig:
    def test_input_style_keys_and_percentages(self, tmp_path, output_files):
        config_path = tmp_path / "benchcompare.yml"
        config_path.write_text(
            "name: My suite\n"
            "tool: catch2\n"
            "pr-benchmark-file-path: pr.txt\n"
            "base-benchmark-file-path: base.txt\n"
            "alert-threshold: 150%\n"
            "fail-threshold: 3.0\n"
            "fail-on-alert: true\n"
            "alert-comment-cc-users: '@foo, @bar'\n",
            encoding="utf-8",
        )

        config = load_config(config_path)

        assert config.name == "My suite"
        assert config.tool == ToolType.CATCH2
        assert config.pr_benchmark_file_path == output_files[0].resolve()
        assert config.thresholds == Thresholds(alert_threshold=1.5, fail_threshold=3.0)
        assert config.fail_on_alert
        assert config.alert_comment_cc_users == ["@foo", "@bar"]

    def test_field_name_keys(self, tmp_path, output_files):
        config_path = tmp_path / "benchcompare.yml"
        config_path.write_text(
            "tool: pytest\n"
            f"pr_benchmark_file_path: {output_files[0]}\n"
            f"base_benchmark_file_path: {output_files[1]}\n"
            "alert_threshold: 2\n"
            "alert_comment_cc_users: ['@foo']\n",
            encoding="utf-8",
        )

        config = load_config(config_path)

        assert config.tool == ToolType.PYTEST
        assert config.alert_comment_cc_users == ["@foo"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path / "missing.yml")
        assert exc_info.value.error_code == "CONFIG_002"

    def test_invalid_yaml(self, tmp_path):
        config_path = tmp_path / "broken.yml"
        config_path.write_text("tool: [cargo\n", encoding="utf-8")

        with pytest.raises(ConfigError) as exc_info:
            load_config(config_path)

        assert str(exc_info.value).startswith("Error parsing YAML configuration")

    def test_non_mapping_document(self, tmp_path):
        config_path = tmp_path / "list.yml"
        config_path.write_text("- cargo\n- go\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="must be a mapping"):
            load_config(config_path)

    def test_invalid_percentage(self, tmp_path, output_files):
        config_path = tmp_path / "bad.yml"
        config_path.write_text("tool: go\nalert-threshold: lots%\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="'alert-threshold' input cannot be parsed as float number"):
            load_config(config_path)
