"""Tests for configuration models and YAML loading."""

from pathlib import Path
from textwrap import dedent

import pytest
from pydantic import ValidationError

from jobboard.core.config import DatabaseConfig, LoggingConfig, SeedConfig, Settings


class TestDatabaseConfig:
    def test_defaults(self) -> None:
        db = DatabaseConfig()
        assert db.backend == "sqlite"
        assert db.path == "data/jobboard.db"

    def test_backend_normalised(self) -> None:
        assert DatabaseConfig(backend="  MEMORY ").backend == "memory"

    def test_unknown_backend_rejected(self) -> None:
        with pytest.raises(ValidationError, match="backend must be one of"):
            DatabaseConfig(backend="postgres")

    def test_empty_path_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DatabaseConfig(path="   ")

    def test_path_stripped(self) -> None:
        assert DatabaseConfig(path=" data/x.db ").path == "data/x.db"


class TestLoggingConfig:
    def test_level_uppercased(self) -> None:
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_unknown_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LoggingConfig(level="chatty")


class TestSeedConfig:
    def test_demo_data_on_by_default(self) -> None:
        assert SeedConfig().demo_data is True


class TestSettingsFromYaml:
    def test_full_file(self, tmp_path: Path) -> None:
        cfg = tmp_path / "settings.yaml"
        cfg.write_text(dedent("""\
            database:
              backend: memory
              path: /tmp/ignored.db
            seed:
              demo_data: false
            logging:
              level: warning
        """))
        settings = Settings.from_yaml(cfg)
        assert settings.database.backend == "memory"
        assert settings.seed.demo_data is False
        assert settings.logging.level == "WARNING"

    def test_partial_file_uses_defaults(self, tmp_path: Path) -> None:
        cfg = tmp_path / "settings.yaml"
        cfg.write_text("database:\n  path: other.db\n")
        settings = Settings.from_yaml(cfg)
        assert settings.database.path == "other.db"
        assert settings.database.backend == "sqlite"
        assert settings.logging.level == "INFO"

    def test_empty_file(self, tmp_path: Path) -> None:
        cfg = tmp_path / "settings.yaml"
        cfg.write_text("")
        assert Settings.from_yaml(cfg) == Settings()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            Settings.from_yaml(tmp_path / "nope.yaml")

    def test_invalid_value_raises(self, tmp_path: Path) -> None:
        cfg = tmp_path / "settings.yaml"
        cfg.write_text("database:\n  backend: mongo\n")
        with pytest.raises(ValidationError):
            Settings.from_yaml(cfg)

    def test_shipped_settings_load(self) -> None:
        path = Path(__file__).parent.parent.parent / "config" / "settings.yaml"
        settings = Settings.from_yaml(path)
        assert settings.database.backend == "sqlite"
        assert settings.seed.demo_data is True
