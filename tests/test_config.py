"""Tests for config loading, merging and validation."""

import json

import pytest

from browser_runner.config import (
    BrowserOptions,
    RunOptions,
    find_config,
    load_config_file,
    merge_options,
    parse_options_data,
    resolve_options,
    validate_options,
)
from browser_runner.config.schema import DEFAULT_CONFIG
from browser_runner.errors import ConfigError


@pytest.fixture
def project(fixtures_dir):
    return fixtures_dir / "sample_project"


class TestLoadConfigFile:
    def test_json(self, project):
        data = load_config_file(project / "sample_config.json")

        assert data["port"] == 1234
        assert data["browser"] == {"name": "chrome"}

    def test_yaml(self, project):
        data = load_config_file(project / "sample_config.yaml")

        assert data["random"] is False
        assert data["browser"]["name"] == "headlessChrome"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config_file(tmp_path / "nope.json")

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigError, match="Could not parse"):
            load_config_file(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_config_file(path)

    def test_empty_yaml_is_empty_mapping(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config_file(path) == {}

    def test_default_config_is_valid_json(self):
        data = json.loads(DEFAULT_CONFIG)

        assert data["browser"] == {"name": "firefox"}
        assert data["env"]["random"] is True


class TestFindConfig:
    def test_explicit_path_relative_to_base_dir(self, project):
        assert find_config(project, "sample_config.json") == project / "sample_config.json"

    def test_explicit_missing_path_is_an_error(self, project):
        with pytest.raises(ConfigError):
            find_config(project, "missing.json")

    def test_default_path(self, project):
        assert find_config(project) == project / "spec/support/browser-runner.json"

    def test_no_default_file(self, tmp_path):
        assert find_config(tmp_path) is None


class TestMergeOptions:
    def test_cli_overrides_file(self):
        merged = merge_options({"port": 1234, "color": True}, {"port": 2345})

        assert merged == {"port": 2345, "color": True}

    def test_absent_cli_values_do_not_clobber(self):
        merged = merge_options({"random": True, "seed": "1"}, {"random": None, "seed": None})

        assert merged == {"random": True, "seed": "1"}

    def test_false_cli_value_overrides(self):
        merged = merge_options({"color": True}, {"color": False})

        assert merged["color"] is False

    def test_browser_name_override_keeps_grid_settings(self):
        file_values = {"browser": {"name": "firefox", "useRemoteSeleniumGrid": True}}

        merged = merge_options(file_values, {"browser": {"name": "chrome"}})

        assert merged["browser"] == {"name": "chrome", "useRemoteSeleniumGrid": True}

    def test_defaults_have_lowest_precedence(self):
        merged = merge_options({"port": 1}, {}, defaults={"port": 0, "hostname": "h"})

        assert merged == {"port": 1, "hostname": "h"}

    def test_fail_fast_forces_stop_flags_only(self):
        merged = merge_options({}, {"failFast": True})

        assert merged["env"] == {
            "stopOnSpecFailure": True,
            "stopSpecOnExpectationFailure": True,
        }

    def test_fail_fast_keeps_other_env_values(self):
        merged = merge_options({"env": {"random": False, "stopOnSpecFailure": False}},
                               {"failFast": True})

        assert merged["env"] == {
            "random": False,
            "stopOnSpecFailure": True,
            "stopSpecOnExpectationFailure": True,
        }

    def test_does_not_mutate_inputs(self):
        file_values = {"env": {"random": True}}

        merge_options(file_values, {"failFast": True})

        assert file_values == {"env": {"random": True}}


class TestParseOptionsData:
    def test_maps_keys(self, project):
        options = parse_options_data(load_config_file(project / "sample_config.json"))

        assert options.src_dir == "src"
        assert options.spec_files == ["**/*Spec.js"]
        assert options.framework_dir == "framework"
        assert options.port == 1234
        assert options.browser == BrowserOptions(name="chrome")

    def test_unknown_keys_survive_round_trip(self):
        options = parse_options_data({"port": 1, "customThing": {"a": 1}})

        assert options.extra == {"customThing": {"a": 1}}
        assert options.to_dict()["customThing"] == {"a": 1}

    def test_browser_name_string(self):
        assert parse_options_data({"browser": "safari"}).browser.name == "safari"

    def test_remote_grid_settings(self):
        options = parse_options_data({"browser": {
            "name": "chrome",
            "useRemoteSeleniumGrid": True,
            "seleniumGridUrl": "http://grid:4444/wd/hub",
            "capabilities": {"platformName": "linux"},
        }})

        assert options.browser.use_remote_grid is True
        assert options.browser.grid_url == "http://grid:4444/wd/hub"
        assert options.browser.capabilities == {"platformName": "linux"}

    def test_single_string_pattern_becomes_list(self):
        assert parse_options_data({"specFiles": "*Spec.js"}).spec_files == ["*Spec.js"]

    def test_seed_is_a_string(self):
        assert parse_options_data({"seed": 1234}).seed == "1234"

    @pytest.mark.parametrize("data,message", [
        ({"port": "abc"}, "'port' must be an integer"),
        ({"env": []}, "'env' must be a mapping"),
        ({"specFiles": [1]}, r"specFiles\[0\] must be a string"),
        ({"browser": 3}, "'browser' must be a name or a mapping"),
        ({"timeout": "soon"}, "'timeout' must be a number"),
    ])
    def test_shape_errors(self, data, message):
        with pytest.raises(ConfigError, match=message):
            parse_options_data(data)


class TestValidateOptions:
    def test_valid_defaults_warn_about_missing_specs(self):
        result = validate_options(RunOptions())

        assert result.valid
        assert any(w.path == "specFiles" for w in result.warnings)

    def test_port_out_of_range(self):
        result = validate_options(RunOptions(port=70000, spec_files=["*.js"]))

        assert not result.valid
        assert result.errors[0].path == "port"

    def test_unsupported_browser(self):
        result = validate_options(RunOptions(browser=BrowserOptions(name="netscape")))

        assert [e.path for e in result.errors] == ["browser.name"]

    def test_browser_names_case_insensitive(self):
        result = validate_options(RunOptions(browser=BrowserOptions(name="Internet Explorer")))

        assert result.valid

    def test_remote_grid_needs_url(self):
        browser = BrowserOptions(name="chrome", use_remote_grid=True)

        result = validate_options(RunOptions(browser=browser))

        assert [e.path for e in result.errors] == ["browser.seleniumGridUrl"]

    def test_remote_grid_browser_name_is_checked(self):
        browser = BrowserOptions(name="edge", use_remote_grid=True,
                                 grid_url="http://grid:4444/wd/hub")

        result = validate_options(RunOptions(browser=browser))

        assert [e.path for e in result.errors] == ["browser.name"]

    def test_env_flags_must_be_booleans(self):
        result = validate_options(RunOptions(env={"random": "yes"}))

        assert [e.path for e in result.errors] == ["env.random"]

    def test_unknown_env_key_is_a_warning(self):
        result = validate_options(RunOptions(env={"somethingNew": 1}))

        assert result.valid
        assert any(w.path == "env.somethingNew" for w in result.warnings)


class TestResolveOptions:
    def test_explicit_config(self, project):
        options = resolve_options(project, "sample_config.json", {})

        assert options.port == 1234
        assert options.base_dir == str(project)

    def test_default_config(self, project):
        options = resolve_options(project)

        assert options.color is False
        assert options.browser.name == "firefox"

    def test_cli_wins(self, project):
        options = resolve_options(project, "sample_config.json", {"port": 2345, "seed": None})

        assert options.port == 2345

    def test_no_config_file_uses_defaults(self, tmp_path):
        options = resolve_options(tmp_path, None, {"specFiles": ["*.js"]})

        assert options.port is None
        assert options.browser.name == "firefox"

    def test_invalid_configuration_raises_before_anything_starts(self, tmp_path):
        with pytest.raises(ConfigError, match="Invalid configuration: port"):
            resolve_options(tmp_path, None, {"port": -1})
