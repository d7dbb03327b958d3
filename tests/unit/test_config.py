import logging
import os
from pathlib import Path

import pytest
import yaml
from omegaconf.errors import InterpolationResolutionError

from trove import FailurePolicy, Trove
from trove.core.config import ConfigLoader


class TestConfigLoader:
    def test_load_config_with_trove_section(self, tmp_path: Path) -> None:
        config_file = tmp_path / "trove.yaml"
        config_data = {"trove": {"failure_policy": "collect", "log_level": "DEBUG"}}
        config_file.write_text(yaml.dump(config_data))

        loader = ConfigLoader()
        config = loader.load_config(str(config_file))

        assert config["trove"]["failure_policy"] == "collect"
        assert config["trove"]["log_level"] == "DEBUG"

    def test_load_config_missing_file_uses_built_in_defaults(self) -> None:
        loader = ConfigLoader()
        config = loader.load_config("/nonexistent/path/trove.yaml")

        assert config == {"trove": {}}
        merged = loader.get_trove_config(config)
        assert merged == loader.BUILT_IN_DEFAULTS

    def test_load_config_from_env_var(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.yaml"
        config_file.write_text(yaml.dump({"trove": {"name": "from-env"}}))
        os.environ["TROVE_CONFIG"] = str(config_file)

        config = ConfigLoader().load_config()

        assert config["trove"]["name"] == "from-env"

    def test_empty_file_returns_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "trove.yaml"
        config_file.write_text("")

        assert ConfigLoader().load_config(str(config_file)) == {"trove": {}}

    def test_invalid_yaml_raises_value_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "trove.yaml"
        config_file.write_text("trove: [unclosed")

        with pytest.raises(ValueError, match="Invalid YAML"):
            ConfigLoader().load_config(str(config_file))

    def test_vars_interpolation(self, tmp_path: Path) -> None:
        config_file = tmp_path / "trove.yaml"
        config_file.write_text(
            "vars:\n"
            "  policy: collect\n"
            "trove:\n"
            "  failure_policy: ${policy}\n"
        )

        config = ConfigLoader().load_config(str(config_file))

        assert config["trove"]["failure_policy"] == "collect"

    def test_undefined_variable_raises(self, tmp_path: Path) -> None:
        config_file = tmp_path / "trove.yaml"
        config_file.write_text("trove:\n  name: ${missing}\n")

        with pytest.raises(InterpolationResolutionError):
            ConfigLoader().load_config(str(config_file))


class TestTroveConfigMerging:
    def test_profile_overrides_trove_section(self) -> None:
        config = {
            "trove": {"failure_policy": "propagate", "log_level": "INFO"},
            "profiles": {"scene": {"failure_policy": "collect"}},
        }

        merged = ConfigLoader().get_trove_config(config, "scene")

        assert merged["failure_policy"] == "collect"
        assert merged["log_level"] == "INFO"
        assert merged["name"] == "scene"

    def test_unknown_profile_lists_available(self) -> None:
        config = {"trove": {}, "profiles": {"scene": {}, "ui": {}}}

        with pytest.raises(ValueError, match="Available profiles: \\['scene', 'ui'\\]"):
            ConfigLoader().get_trove_config(config, "audio")

    def test_unknown_profile_without_profiles(self) -> None:
        with pytest.raises(ValueError, match="No profiles are defined"):
            ConfigLoader().get_trove_config({"trove": {}}, "audio")


class TestTroveFromConfig:
    def test_from_config_builds_trove(self, restore_trove_logger: None) -> None:
        loader = ConfigLoader()
        merged = loader.get_trove_config({"trove": {"name": "hud", "failure_policy": "collect"}})

        trove = Trove.from_config(merged)

        assert trove.name == "hud"
        assert trove.failure_policy is FailurePolicy.COLLECT

    def test_from_config_applies_log_level(self, restore_trove_logger: None) -> None:
        loader = ConfigLoader()
        merged = loader.get_trove_config({"trove": {"log_level": "debug"}})

        Trove.from_config(merged)

        assert logging.getLogger("trove").level == logging.DEBUG

    def test_from_config_fills_missing_keys(self, restore_trove_logger: None) -> None:
        trove = Trove.from_config({"name": "ui"})

        assert trove.name == "ui"
        assert trove.failure_policy is FailurePolicy.PROPAGATE
        assert logging.getLogger("trove").level == logging.WARNING

    def test_from_config_rejects_invalid_config(self, restore_trove_logger: None) -> None:
        with pytest.raises(ValueError, match="log_level must be one of"):
            Trove.from_config({"log_level": "LOUD"})


class TestValidateConfig:
    def test_defaults_are_valid(self) -> None:
        loader = ConfigLoader()
        loader.validate_config(loader.get_trove_config({"trove": {}}))

    @pytest.mark.parametrize(
        ("overrides", "message"),
        [
            ({"failure_policy": "retry"}, "failure_policy must be one of"),
            ({"failure_policy": 3}, "failure_policy must be a string"),
            ({"log_level": "LOUD"}, "log_level must be one of"),
            ({"log_level": 10}, "log_level must be a string"),
            ({"name": 5}, "name must be a string"),
        ],
    )
    def test_invalid_values(self, overrides: dict, message: str) -> None:
        loader = ConfigLoader()
        config = loader.get_trove_config({"trove": overrides})

        with pytest.raises(ValueError, match=message):
            loader.validate_config(config)

    def test_log_level_case_insensitive(self) -> None:
        loader = ConfigLoader()
        loader.validate_config(loader.get_trove_config({"trove": {"log_level": "debug"}}))
