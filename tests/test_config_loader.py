"""
Tests for configuration loading and layered .env support.
"""

import json
import os
from pathlib import Path

import pytest
from devdiary.core.config import (
    DiaryConfig,
    LatencyConfig,
    clear_cache,
    get_project_config_path,
    get_user_config_path,
    load_config,
    load_layered_env,
)
from devdiary.core.config.loader import merge_layer, read_config_layer
from devdiary.core.errors import ValidationError


def write_json(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))


class TestDefaults:
    """Test built-in defaults."""

    def test_defaults(self, tmp_path: Path) -> None:
        """Test an empty environment yields default settings."""
        config = load_config(project_dir=tmp_path, use_cache=False)

        assert config.storage.path is None
        assert config.storage.serialize_mutations is False
        assert config.suggestions.limit == 4
        assert config.latency.scale == 0.0

    def test_user_config_location(self, tmp_path: Path) -> None:
        """Test the user config lives under XDG_CONFIG_HOME."""
        assert get_user_config_path() == tmp_path / "xdg-config" / "devdiary" / "config.json"


class TestLayering:
    """Test defaults < user < project < env precedence."""

    def test_user_config_applied(self, tmp_path: Path) -> None:
        """Test user settings override defaults."""
        write_json(get_user_config_path(), {"suggestions": {"limit": 3}})

        config = load_config(project_dir=tmp_path, use_cache=False)

        assert config.suggestions.limit == 3

    def test_project_overrides_user(self, tmp_path: Path) -> None:
        """Test project settings override user settings key by key."""
        write_json(
            get_user_config_path(),
            {"storage": {"serialize_mutations": True}, "suggestions": {"limit": 3}},
        )
        write_json(get_project_config_path(tmp_path), {"suggestions": {"limit": 2}})

        config = load_config(project_dir=tmp_path, use_cache=False)

        assert config.suggestions.limit == 2
        assert config.storage.serialize_mutations is True

    def test_env_overrides_files(self, tmp_path: Path, monkeypatch) -> None:
        """Test DEVDIARY_* variables beat every file."""
        write_json(get_project_config_path(tmp_path), {"storage": {"path": "/from/file.json"}})
        monkeypatch.setenv("DEVDIARY_STORAGE_PATH", str(tmp_path / "env.json"))
        monkeypatch.setenv("DEVDIARY_SERIALIZE_MUTATIONS", "true")
        monkeypatch.setenv("DEVDIARY_SUGGESTION_LIMIT", "1")
        monkeypatch.setenv("DEVDIARY_LATENCY_SCALE", "0.25")

        config = load_config(project_dir=tmp_path, use_cache=False)

        assert config.storage.path == tmp_path / "env.json"
        assert config.storage.serialize_mutations is True
        assert config.suggestions.limit == 1
        assert config.latency.scale == 0.25

    @pytest.mark.parametrize(
        "name,value",
        [
            ("DEVDIARY_SUGGESTION_LIMIT", "9"),
            ("DEVDIARY_SUGGESTION_LIMIT", "many"),
            ("DEVDIARY_LATENCY_SCALE", "-1"),
            ("DEVDIARY_LATENCY_SCALE", "fast"),
        ],
    )
    def test_invalid_env_values_ignored(
        self, tmp_path: Path, monkeypatch, name: str, value: str
    ) -> None:
        """Test out-of-range or unparseable env values fall back."""
        monkeypatch.setenv(name, value)

        config = load_config(project_dir=tmp_path, use_cache=False)

        assert config.suggestions.limit == 4
        assert config.latency.scale == 0.0

    def test_broken_config_file_skipped(self, tmp_path: Path) -> None:
        """Test an unparseable config file is skipped."""
        get_project_config_path(tmp_path).write_text("{oops")

        config = load_config(project_dir=tmp_path, use_cache=False)

        assert config.suggestions.limit == 4

    def test_invalid_value_in_file_raises(self, tmp_path: Path) -> None:
        """Test a well-formed file with an out-of-range value fails validation."""
        write_json(get_project_config_path(tmp_path), {"suggestions": {"limit": 10}})

        with pytest.raises(ValidationError, match="suggestions.limit"):
            load_config(project_dir=tmp_path, use_cache=False)


class TestCache:
    """Test the module-level config cache."""

    def test_cached_until_cleared(self, tmp_path: Path) -> None:
        """Test load_config returns the cached instance until clear_cache."""
        first = load_config(project_dir=tmp_path)
        write_json(get_project_config_path(tmp_path), {"suggestions": {"limit": 2}})

        assert load_config(project_dir=tmp_path) is first

        clear_cache()
        assert load_config(project_dir=tmp_path).suggestions.limit == 2


class TestHelpers:
    """Test merge and model helpers."""

    def test_merge_layer_keeps_section_keys(self) -> None:
        """Test a layer replaces keys inside a section, not the whole section."""
        base = {"storage": {"path": None, "serialize_mutations": False}}

        merged = merge_layer(base, {"storage": {"serialize_mutations": True}})

        assert merged == {"storage": {"path": None, "serialize_mutations": True}}
        assert base["storage"]["serialize_mutations"] is False

    def test_non_object_config_is_empty_layer(self, tmp_path: Path) -> None:
        """Test a config file holding a list contributes nothing."""
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")

        assert read_config_layer(path) == {}
        assert read_config_layer(tmp_path / "missing.json") == {}

    def test_latency_delay_for(self) -> None:
        """Test per-operation delays scale and unknown operations are free."""
        latency = LatencyConfig(scale=2.0)

        assert latency.delay_for("submit") == pytest.approx(2.4)
        assert latency.delay_for("delete") == pytest.approx(1.0)
        assert latency.delay_for("export") == 0.0

    def test_extra_keys_allowed(self) -> None:
        """Test unknown top-level keys are tolerated."""
        config = DiaryConfig(**{"theme": "dark"})

        assert config.suggestions.limit == 4


class TestLayeredEnv:
    """Test .env loading."""

    def test_project_env_overrides_user_env(self, tmp_path: Path, monkeypatch) -> None:
        """Test project .env values beat the user .env but not the shell."""
        monkeypatch.delenv("DEVDIARY_TEST_A", raising=False)
        monkeypatch.delenv("DEVDIARY_TEST_B", raising=False)
        monkeypatch.setenv("DEVDIARY_TEST_SHELL", "shell")

        user_env = tmp_path / "user.env"
        user_env.write_text("DEVDIARY_TEST_A=user\nDEVDIARY_TEST_B=user\n")
        project_env = tmp_path / "project.env"
        project_env.write_text("DEVDIARY_TEST_A=project\nDEVDIARY_TEST_SHELL=project\n")

        try:
            load_layered_env(user_env_paths=[user_env], project_env_paths=[project_env])

            assert os.environ["DEVDIARY_TEST_A"] == "project"
            assert os.environ["DEVDIARY_TEST_B"] == "user"
            assert os.environ["DEVDIARY_TEST_SHELL"] == "shell"
        finally:
            os.environ.pop("DEVDIARY_TEST_A", None)
            os.environ.pop("DEVDIARY_TEST_B", None)

    def test_missing_files_ignored(self, tmp_path: Path) -> None:
        """Test absent .env files are not an error."""
        load_layered_env(
            user_env_paths=[tmp_path / "none.env"],
            project_env_paths=[tmp_path / "nope.env"],
        )

    def test_only_diary_keys_loaded(self, tmp_path: Path, monkeypatch) -> None:
        """Test unrelated keys in a project .env stay out of the environment."""
        monkeypatch.delenv("DEVDIARY_TEST_C", raising=False)
        monkeypatch.delenv("DATABASE_URL", raising=False)
        project_env = tmp_path / ".env"
        project_env.write_text("DATABASE_URL=postgres://db\nDEVDIARY_TEST_C=yes\n")

        try:
            exported = load_layered_env(user_env_paths=[], project_env_paths=[project_env])

            assert exported == {"DEVDIARY_TEST_C": str(project_env)}
            assert "DATABASE_URL" not in os.environ
        finally:
            os.environ.pop("DEVDIARY_TEST_C", None)
