"""Tests for run configuration and logging setup."""

import logging

import pytest
import yaml

from shearmd.config import RunConfig
from shearmd.errors import ConfigurationError
from shearmd.logging_config import setup_logging


class TestRunConfig:
    """Tests for RunConfig."""

    def test_defaults(self):
        config = RunConfig()
        config.validate()
        assert config.n_blocks == 10
        assert config.n_steps == 1000
        assert config.r_cut == 2.5
        assert config.dt == 0.005
        assert config.strain_rate == 0.01
        assert not config.multiple_timestep

    def test_from_dict(self):
        config = RunConfig.from_dict(
            {"n_blocks": 2, "shell_cutoffs": [1.5, 2.5], "n_mts": [1, 4]}
        )
        assert config.n_blocks == 2
        assert config.shell_cutoffs == (1.5, 2.5)
        assert config.n_mts == (1, 4)
        assert config.multiple_timestep

    def test_unknown_key(self):
        with pytest.raises(ConfigurationError):
            RunConfig.from_dict({"nblock": 3})

    @pytest.mark.parametrize(
        "data",
        [
            {"n_blocks": 0},
            {"n_steps": -1},
            {"dt": 0.0},
            {"r_cut": -2.5},
            {"switch_width": -0.1},
            {"shell_cutoffs": [1.5, 2.5]},
            {"shell_cutoffs": [1.5, 2.5], "n_mts": [1]},
        ],
    )
    def test_invalid_values(self, data):
        with pytest.raises(ConfigurationError):
            RunConfig.from_dict(data)

    def test_yaml_round_trip(self, tmp_path):
        config = RunConfig(n_blocks=3, shell_cutoffs=(1.5, 2.5), n_mts=(1, 2))
        path = tmp_path / "run.yaml"
        config.to_yaml(path)

        loaded = RunConfig.from_yaml(path)
        assert loaded == config

    def test_yaml_hand_written(self, tmp_path):
        path = tmp_path / "run.yaml"
        path.write_text(
            "n_blocks: 5\n"
            "n_steps: 100\n"
            "dt: 0.002\n"
            "shell_cutoffs: [1.5, 2.0, 2.5]\n"
            "n_mts: [1, 2, 2]\n"
        )
        config = RunConfig.from_yaml(path)
        assert config.n_blocks == 5
        assert config.shell_cutoffs == (1.5, 2.0, 2.5)
        assert config.n_mts == (1, 2, 2)
        assert yaml.safe_load(path.read_text())["dt"] == config.dt

    @pytest.mark.parametrize("text", ["[1, 2]\n", "just a string\n", ""])
    def test_yaml_not_mapping(self, tmp_path, text):
        path = tmp_path / "run.yaml"
        path.write_text(text)
        with pytest.raises(ConfigurationError):
            RunConfig.from_yaml(path)

    def test_numeric_strings_coerced(self):
        config = RunConfig.from_dict({"n_blocks": "10", "dt": "0.002", "n_mts": None})
        assert config.n_blocks == 10
        assert isinstance(config.n_blocks, int)
        assert config.dt == 0.002

    @pytest.mark.parametrize(
        "data",
        [
            {"n_blocks": "ten"},
            {"n_steps": 2.5},
            {"dt": None},
            {"seed": True},
            {"shell_cutoffs": "1.5", "n_mts": [1]},
            {"shell_cutoffs": [1.5, 2.5], "n_mts": [1, "two"]},
        ],
    )
    def test_wrong_types(self, data):
        with pytest.raises(ConfigurationError):
            RunConfig.from_dict(data)


class TestLogging:
    """Tests for logging setup."""

    def test_handlers(self, tmp_path):
        log_file = tmp_path / "run.log"
        setup_logging(logging.DEBUG, str(log_file))

        logger = logging.getLogger("shearmd")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2

        setup_logging(logging.INFO)
        assert len(logger.handlers) == 1
        assert "Logging initialized." in log_file.read_text()

        logger.handlers.clear()
