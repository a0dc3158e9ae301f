"""
Tests for configuration loading and logging setup.
"""

import logging

import pytest

from src.learning.config_loader import CONFIG_PATH_ENV, load_optimizer_config
from src.learning.errors import ConfigLoadError, OptimizerError
from src.utils.logging import PACKAGE_LOGGERS, PROJECT_LOGGER, get_logger, setup_logging


class TestLoadOptimizerConfig:
    """Tests for load_optimizer_config."""

    def test_missing_file_uses_defaults(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            config = load_optimizer_config(tmp_path / "absent.yaml")

        assert config.exploration_strategy == "thompson_sampling"
        assert "using default configuration" in caplog.text

    def test_yaml_overrides(self, tmp_path):
        path = tmp_path / "optimizer.yaml"
        path.write_text(
            "exploration_strategy: ucb\n"
            "ucb_constant: 1.5\n"
            "reward_shaping_weights:\n"
            "  completion_bonus: 0.4\n"
        )

        config = load_optimizer_config(path)

        assert config.exploration_strategy == "ucb"
        assert config.ucb_constant == 1.5
        assert config.reward_shaping_weights.completion_bonus == 0.4
        assert config.reward_shaping_weights.engagement_bonus == 0.2

    def test_nested_under_optimizer_key(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("optimizer:\n  epsilon: 0.25\n")

        assert load_optimizer_config(path).epsilon == 0.25

    def test_path_from_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yaml"
        path.write_text("max_interventions_per_day: 4\n")
        monkeypatch.setenv(CONFIG_PATH_ENV, str(path))

        assert load_optimizer_config().max_interventions_per_day == 4

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_optimizer_config(path).epsilon == 0.1

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("epsilon: [0.1\n")

        with pytest.raises(ConfigLoadError):
            load_optimizer_config(path)

    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- ucb\n- thompson_sampling\n")

        with pytest.raises(OptimizerError, match="must contain a mapping"):
            load_optimizer_config(path)


@pytest.fixture
def restore_loggers():
    """Undo setup_logging so later tests see default logger state."""
    names = (PROJECT_LOGGER, *PACKAGE_LOGGERS)
    saved = {name: (logging.getLogger(name).level, list(logging.getLogger(name).handlers)) for name in names}
    yield
    for name, (level, handlers) in saved.items():
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            if handler not in handlers:
                handler.close()
        logger.setLevel(level)
        logger.handlers = handlers


class TestLogging:
    """Tests for logging setup."""

    def test_setup_logging_level(self, tmp_path, restore_loggers):
        log_file = tmp_path / "logs" / "optimizer.log"

        logger = setup_logging(level="DEBUG", log_file=str(log_file))
        logging.getLogger("src.learning.optimizer").debug("arm updated")

        assert logger.name == PROJECT_LOGGER
        assert logger.level == logging.DEBUG
        for handler in logging.getLogger("src").handlers:
            handler.flush()
        assert "arm updated" in log_file.read_text()

    def test_level_from_environment(self, monkeypatch, restore_loggers):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")

        setup_logging()

        assert logging.getLogger("api").level == logging.ERROR

    def test_get_logger_is_namespaced(self):
        assert get_logger("api").name == f"{PROJECT_LOGGER}.api"
        assert get_logger().name == PROJECT_LOGGER
