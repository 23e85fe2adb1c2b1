"""Tests for configuration models and YAML loading."""

from pathlib import Path
from textwrap import dedent

import pytest
from pydantic import ValidationError

from careersim.core.config import (
    CatalogConfig,
    DatabaseConfig,
    SelectorConfig,
    Settings,
    SimulationConfig,
)


class TestSimulationConfig:
    def test_defaults(self) -> None:
        c = SimulationConfig()
        assert c.daily_stress_drift == 0.5
        assert c.application_chance == 0.6
        assert c.transition_chance == 0.1
        assert c.max_days == 365
        assert c.referral_ends_run is False

    def test_chance_bounds(self) -> None:
        with pytest.raises(ValidationError):
            SimulationConfig(application_chance=1.5)
        with pytest.raises(ValidationError):
            SimulationConfig(transition_chance=-0.1)

    def test_max_days_min(self) -> None:
        with pytest.raises(ValidationError):
            SimulationConfig(max_days=0)


class TestSelectorConfig:
    def test_defaults(self) -> None:
        c = SelectorConfig()
        assert c.history_cap == 100
        assert c.recent_window_days == 30
        assert c.cooldown_period == 50

    def test_history_cap_min(self) -> None:
        with pytest.raises(ValidationError):
            SelectorConfig(history_cap=0)


class TestCatalogConfig:
    def test_default_is_packaged(self) -> None:
        assert CatalogConfig().path is None


class TestDatabaseConfig:
    def test_default_path(self) -> None:
        assert DatabaseConfig().path == "data/sessions.db"


class TestSettings:
    def test_defaults(self) -> None:
        s = Settings()
        assert s.simulation.max_days == 365
        assert s.selector.history_cap == 100

    def test_from_yaml(self, tmp_path: Path) -> None:
        yaml_content = dedent("""\
            simulation:
              transition_chance: 0.25
              referral_ends_run: true
            selector:
              history_cap: 20
            catalog:
              path: custom/catalog.yaml
            database:
              path: /tmp/test.db
        """)
        path = tmp_path / "settings.yaml"
        path.write_text(yaml_content)

        s = Settings.from_yaml(path)
        assert s.simulation.transition_chance == 0.25
        assert s.simulation.referral_ends_run is True
        assert s.simulation.application_chance == 0.6
        assert s.selector.history_cap == 20
        assert s.catalog.path == "custom/catalog.yaml"
        assert s.database.path == "/tmp/test.db"

    def test_from_yaml_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        s = Settings.from_yaml(path)
        assert s == Settings()

    def test_from_yaml_file_not_found(self) -> None:
        with pytest.raises(FileNotFoundError):
            Settings.from_yaml("/nonexistent/settings.yaml")

    def test_from_yaml_invalid_value(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("simulation:\n  application_chance: 2\n")
        with pytest.raises(ValidationError):
            Settings.from_yaml(path)

    def test_shipped_settings_load(self) -> None:
        s = Settings.from_yaml(Path(__file__).parents[2] / "config" / "settings.yaml")
        assert s.simulation == SimulationConfig()
        assert s.selector == SelectorConfig()
