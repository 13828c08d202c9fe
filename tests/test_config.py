import json

import pytest

from config.preview_config import ConfigError, ConfigManager, PreviewConfig


class TestPresets:
    def test_default_values(self) -> None:
        config = ConfigManager.default()
        assert config.chord_tolerance == 0.01
        assert config.sweep_epsilon == 5e-7
        assert config.arc_absolute_tolerance == 0.5
        assert config.arc_minimum_tolerance == 0.005
        assert config.arc_relative_tolerance == 0.001
        assert config.rapid_color == (1.0, 0.0, 0.0)
        assert config.feed_color == (0.0, 1.0, 0.0)

    @pytest.mark.parametrize("preset, tolerance", [
        ("default", 0.01),
        ("fine", 0.001),
        ("Coarse", 0.1),
    ])
    def test_get_config(self, preset: str, tolerance: float) -> None:
        assert ConfigManager.get_config(preset).chord_tolerance == tolerance

    def test_unknown_preset(self) -> None:
        with pytest.raises(ConfigError, match="ultra"):
            ConfigManager.get_config("ultra")

    def test_presets_are_valid(self) -> None:
        for preset in ("default", "fine", "coarse"):
            ConfigManager.get_config(preset).validate()


class TestValidation:
    @pytest.mark.parametrize("overrides", [
        {"chord_tolerance": 0.0},
        {"chord_tolerance": -1.0},
        {"arc_absolute_tolerance": -0.1},
        {"sweep_epsilon": -1e-9},
        {"rapid_color": (1.0, 0.0)},
        {"feed_color": (0.0, 2.0, 0.0)},
        {"chord_tolerance": float("nan")},
        {"arc_relative_tolerance": float("inf")},
        {"rapid_color": (float("nan"), 0.0, 0.0)},
    ])
    def test_invalid_values(self, overrides: dict) -> None:
        with pytest.raises(ConfigError):
            PreviewConfig(**overrides).validate()

    def test_from_dict_fills_defaults(self) -> None:
        config = ConfigManager.from_dict({"chord_tolerance": 0.05, "feed_color": [0, 0, 1]})
        assert config.chord_tolerance == 0.05
        assert config.feed_color == (0.0, 0.0, 1.0)
        assert config.arc_absolute_tolerance == 0.5

    def test_from_dict_rejects_unknown_keys(self) -> None:
        with pytest.raises(ConfigError, match="tolerence"):
            ConfigManager.from_dict({"chord_tolerence": 0.05})

    def test_from_dict_rejects_bad_types(self) -> None:
        with pytest.raises(ConfigError):
            ConfigManager.from_dict({"chord_tolerance": "fine"})
        with pytest.raises(ConfigError):
            ConfigManager.from_dict([0.01])


class TestPersistence:
    def test_round_trip(self, tmp_path) -> None:
        path = tmp_path / "preview.json"
        original = PreviewConfig(name="Shop", chord_tolerance=0.02, rapid_color=(0.2, 0.2, 0.2))
        ConfigManager.save_config(original, str(path))
        assert ConfigManager.load_config(str(path)) == original

    def test_saved_file_is_plain_json(self, tmp_path) -> None:
        path = tmp_path / "preview.json"
        ConfigManager.save_config(ConfigManager.fine(), str(path))
        data = json.loads(path.read_text())
        assert data["name"] == "Fine"
        assert data["rapid_color"] == [1.0, 0.0, 0.0]

    def test_non_finite_values_in_file(self, tmp_path) -> None:
        path = tmp_path / "nan.json"
        path.write_text(json.dumps({"chord_tolerance": float("nan")}))
        assert "NaN" in path.read_text()
        with pytest.raises(ConfigError, match="finite"):
            ConfigManager.load_config(str(path))

    def test_invalid_json(self, tmp_path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            ConfigManager.load_config(str(path))

    def test_invalid_values_in_file(self, tmp_path) -> None:
        path = tmp_path / "negative.json"
        path.write_text(json.dumps({"chord_tolerance": -0.5}))
        with pytest.raises(ConfigError, match="chord_tolerance"):
            ConfigManager.load_config(str(path))

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(OSError):
            ConfigManager.load_config(str(tmp_path / "absent.json"))
