"""Tests for config loading and logging utilities."""

import logging

import pytest
import yaml


# =============================================================================
# Test ConfigLoader
# =============================================================================

class TestConfigLoader:
    """Tests for ConfigLoader class."""

    def test_load_yaml(self, tmp_path):
        from campose.utils.config_loader import ConfigLoader

        path = tmp_path / "pose.yaml"
        path.write_text("extrinsics:\n  center: [1.0, 2.0, 3.0]\n")

        config = ConfigLoader().load(path)

        assert config == {"extrinsics": {"center": [1.0, 2.0, 3.0]}}

    def test_missing_file_raises(self, tmp_path):
        from campose.utils.config_loader import ConfigLoader

        with pytest.raises(FileNotFoundError):
            ConfigLoader().load(tmp_path / "missing.yaml")

    def test_empty_file_is_empty_dict(self, tmp_path):
        from campose.utils.config_loader import ConfigLoader

        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert ConfigLoader().load(path) == {}

    def test_non_mapping_root_raises(self, tmp_path):
        from campose.utils.config_loader import ConfigLoader

        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")

        with pytest.raises(ValueError):
            ConfigLoader().load(path)

    def test_relative_path_uses_config_dir(self, tmp_path):
        """A bare filename is looked up under config_dir."""
        from campose.utils.config_loader import ConfigLoader

        (tmp_path / "camera.yaml").write_text("logging:\n  level: DEBUG\n")

        config = ConfigLoader(config_dir=str(tmp_path)).load("camera.yaml")

        assert config["logging"]["level"] == "DEBUG"

    def test_include_directive(self, tmp_path):
        """`!include file` values are replaced by the file contents."""
        from campose.utils.config_loader import ConfigLoader

        (tmp_path / "extrinsics.yaml").write_text("center: [0.0, 0.0, 1.0]\n")
        main = tmp_path / "main.yaml"
        main.write_text("extrinsics: '!include extrinsics.yaml'\n")

        config = ConfigLoader().load(main)

        assert config["extrinsics"] == {"center": [0.0, 0.0, 1.0]}

    def test_missing_include_raises(self, tmp_path):
        from campose.utils.config_loader import ConfigLoader

        main = tmp_path / "main.yaml"
        main.write_text("extrinsics: '!include nowhere.yaml'\n")

        with pytest.raises(FileNotFoundError):
            ConfigLoader().load(main)

    def test_cache_returns_independent_copies(self, tmp_path):
        """Mutating a loaded config does not affect the cache."""
        from campose.utils.config_loader import ConfigLoader

        path = tmp_path / "pose.yaml"
        path.write_text("extrinsics:\n  center: [1.0, 2.0, 3.0]\n")
        loader = ConfigLoader()

        first = loader.load(path)
        first["extrinsics"]["center"][0] = 100.0

        assert loader.load(path)["extrinsics"]["center"][0] == 1.0

    def test_cache_and_clear(self, tmp_path):
        """Cached content is served until the cache is cleared."""
        from campose.utils.config_loader import ConfigLoader

        path = tmp_path / "pose.yaml"
        path.write_text("value: 1\n")
        loader = ConfigLoader()

        assert loader.load(path)["value"] == 1

        path.write_text("value: 2\n")
        assert loader.load(path)["value"] == 1
        assert loader.load(path, use_cache=False)["value"] == 2

        loader.clear_cache()
        assert loader.load(path)["value"] == 2

    def test_merge_nested(self):
        from campose.utils.config_loader import ConfigLoader

        base = {"extrinsics": {"center": [0, 0, 0], "tolerance": 1e-6}, "logging": {"level": "INFO"}}
        override = {"extrinsics": {"center": [1, 2, 3]}}

        merged = ConfigLoader().merge(base, override)

        assert merged["extrinsics"] == {"center": [1, 2, 3], "tolerance": 1e-6}
        assert merged["logging"] == {"level": "INFO"}
        assert base["extrinsics"]["center"] == [0, 0, 0]

    def test_save_and_reload(self, tmp_path):
        from campose.utils.config_loader import ConfigLoader

        config = {"extrinsics": {"rotation": [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]]}}
        path = tmp_path / "out" / "saved.yaml"
        loader = ConfigLoader()

        loader.save(config, path)

        assert yaml.safe_load(path.read_text()) == config
        assert loader.load(path) == config

    def test_circular_include_raises(self, tmp_path):
        """Files that include each other are rejected instead of recursing."""
        from campose.utils.config_loader import ConfigLoader

        (tmp_path / "a.yaml").write_text("b: '!include b.yaml'\n")
        (tmp_path / "b.yaml").write_text("a: '!include a.yaml'\n")

        with pytest.raises(ValueError, match="Circular"):
            ConfigLoader().load(tmp_path / "a.yaml")

    def test_self_include_raises(self, tmp_path):
        from campose.utils.config_loader import ConfigLoader

        main = tmp_path / "main.yaml"
        main.write_text("nested:\n  again: '!include main.yaml'\n")

        with pytest.raises(ValueError, match="Circular"):
            ConfigLoader().load(main)

    def test_same_file_included_twice(self, tmp_path):
        """Sibling includes of one file are not a cycle."""
        from campose.utils.config_loader import ConfigLoader

        (tmp_path / "center.yaml").write_text("center: [0.0, 0.0, 1.0]\n")
        main = tmp_path / "main.yaml"
        main.write_text("left: '!include center.yaml'\nright: '!include center.yaml'\n")

        config = ConfigLoader().load(main)

        assert config["left"] == config["right"] == {"center": [0.0, 0.0, 1.0]}


class TestNestedAccess:
    """Tests for dotted-key helpers."""

    def test_get_nested(self):
        from campose.utils.config_loader import get_nested

        config = {"extrinsics": {"euler": {"psi": 90.0}}}

        assert get_nested(config, "extrinsics.euler.psi") == 90.0
        assert get_nested(config, "extrinsics.euler.phi", default=0.0) == 0.0
        assert get_nested(config, "extrinsics.euler.psi.deg") is None



# =============================================================================
# Test Logging
# =============================================================================

class TestLogger:
    """Tests for logger setup."""

    def test_setup_logger_level_and_handlers(self):
        from campose.utils.logger import setup_logger

        logger = setup_logger("campose_test_console", level="debug")

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

        # Calling again replaces handlers instead of stacking them
        logger = setup_logger("campose_test_console", level="WARNING")
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING

    def test_setup_logger_file(self, tmp_path):
        from campose.utils.logger import setup_logger

        log_file = tmp_path / "logs" / "pose.log"
        logger = setup_logger("campose_test_file", log_file=str(log_file), console=False)

        logger.info("camera moved")
        for handler in logger.handlers:
            handler.flush()

        assert "camera moved" in log_file.read_text()
        assert "INFO" in log_file.read_text()

    def test_setup_logger_from_config(self):
        from campose.utils.logger import setup_logger_from_config

        config = {"logging": {"level": "ERROR", "log_file": None}}
        logger = setup_logger_from_config(config, name="campose_test_config")

        assert logger.level == logging.ERROR

    def test_setup_logger_from_config_defaults(self):
        """Missing logging keys fall back to INFO on the console."""
        from campose.utils.logger import setup_logger_from_config

        logger = setup_logger_from_config({}, name="campose_test_defaults")

        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)

    def test_get_logger_sets_up_handlers(self):
        from campose.utils.logger import get_logger

        logger = get_logger("campose_test_get")

        assert logger.handlers

    def test_logger_mixin_name(self):
        from campose.calibration.extrinsics import CameraExtrinsics

        extrinsics = CameraExtrinsics()

        assert extrinsics.logger.name == "campose.CameraExtrinsics"
        assert extrinsics.logger is extrinsics.logger
