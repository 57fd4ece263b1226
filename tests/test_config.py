"""Tests for configuration management."""

import json
from pathlib import Path

import pytest
import torch
import yaml

from stock_assess.config import AssessmentConfig, ConfigManager, load_config
from stock_assess.numerics import posfun, solve_baranov_dd


DEFAULT_CONFIG = Path(__file__).resolve().parent.parent / "configs" / "default.yaml"


class TestAssessmentConfig:
    """Tests for the configuration dataclasses."""

    def test_defaults(self):
        config = AssessmentConfig()
        assert config.barrier.eps == 1e-3
        assert config.baranov.n_iter == 10
        assert config.baranov.b_step == 1.0
        assert config.chapman_robson.kage == 3
        assert config.chapman_robson.aplus == 20
        assert config.logistic_normal.var == 0.1
        assert config.misc.torch_dtype is torch.float64

    def test_unknown_dtype_raises(self):
        config = AssessmentConfig()
        config.misc.dtype = "float128x"
        with pytest.raises(ValueError, match="Unknown torch dtype"):
            config.misc.torch_dtype

    def test_save_yaml_and_reload(self, tmp_path):
        config = AssessmentConfig()
        config.baranov.n_iter = 25
        path = tmp_path / "config.yaml"
        config.save(path)

        with open(path) as f:
            raw = yaml.safe_load(f)
        assert raw["baranov"]["n_iter"] == 25

        loaded = load_config(path).config
        assert loaded == config

    def test_save_json_and_reload(self, tmp_path):
        config = AssessmentConfig()
        config.logistic_normal.var = 0.5
        path = tmp_path / "config.json"
        config.save(path)

        with open(path) as f:
            assert json.load(f)["logistic_normal"]["var"] == 0.5
        assert load_config(path).config == config

    def test_save_unsupported_extension(self, tmp_path):
        with pytest.raises(ValueError, match="Unsupported file extension"):
            AssessmentConfig().save(tmp_path / "config.txt")


class TestConfigManager:
    """Tests for ConfigManager."""

    @pytest.fixture
    def manager(self):
        return ConfigManager()

    def test_default_file_matches_defaults(self):
        assert load_config(DEFAULT_CONFIG).config == AssessmentConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigManager.from_file(tmp_path / "missing.yaml")

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("")
        with pytest.raises(ValueError, match="Unsupported file extension"):
            ConfigManager.from_file(path)

    def test_from_dict_partial(self):
        manager = ConfigManager.from_dict({"barrier": {"eps": 0.01}})
        assert manager.config.barrier.eps == 0.01
        assert manager.config.baranov.n_iter == 10

    def test_from_dict_unknown_section(self):
        with pytest.raises(ValueError, match="Invalid section"):
            ConfigManager.from_dict({"optimizer": {"lr": 0.1}})

    def test_from_dict_unknown_parameter(self):
        with pytest.raises(TypeError):
            ConfigManager.from_dict({"baranov": {"tolerance": 1e-8}})

    def test_update(self, manager):
        manager.update({"baranov.n_iter": 30, "barrier.eps": 1e-4})
        assert manager.get("baranov.n_iter") == 30
        assert manager.config.barrier.eps == 1e-4

    @pytest.mark.parametrize("key", ["baranov", "nothing.n_iter", "baranov.tolerance"])
    def test_update_invalid_key(self, manager, key):
        with pytest.raises(ValueError):
            manager.update({key: 1})

    def test_get_default(self, manager):
        assert manager.get("baranov.tolerance", 7) == 7
        assert manager.get("nothing.eps") is None
        assert manager.get("bad_key", "x") == "x"

    def test_copy_is_independent(self, manager):
        clone = manager.copy()
        clone.update({"logistic_normal.var": 2.0})
        assert manager.config.logistic_normal.var == 0.1

    def test_drives_routines(self, manager):
        manager.update({"baranov.n_iter": 40, "barrier.eps": 0.5})
        config = manager.config

        sol = solve_baranov_dd(config.baranov.n_iter, config.baranov.b_step, 80.0, 0.2, 1000.0)
        assert abs(sol.residual.item()) < 1e-8

        out = posfun(torch.tensor(0.4, dtype=config.misc.torch_dtype), config.barrier.eps)
        assert out.value.item() > config.barrier.eps
