"""Tests for Settings, the YAML layer source, and config types."""

import os as _os
import pathlib as _pathlib

import pydantic as _pydantic
import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import pytest as _pytest

import stepdata.config as config
import stepdata.config.sources as sources
import stepdata.config.types as types


def _write_yaml(path: _pathlib.Path, content: str) -> _pathlib.Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class TestHelperFunctions:
    """Path helpers."""

    def test_get_builtin_defaults_path(self) -> None:
        path = sources.get_builtin_defaults_path()

        assert path.name == "config.yaml"
        assert path.parent.name == "defaults"
        assert path.exists()

    def test_get_user_config_dir_default(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("STEPDATA_CONFIG_DIR", raising=False)

        assert sources.get_user_config_dir() == _pathlib.Path.home() / ".config" / "stepdata"

    def test_get_user_config_path_with_env_var(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STEPDATA_CONFIG_DIR", "/custom/config/dir")

        assert sources.get_user_config_path() == _pathlib.Path("/custom/config/dir/config.yaml")

    def test_get_project_config_path(self) -> None:
        root = _pathlib.Path("/some/project")

        assert sources.get_project_config_path(root) == root / ".stepdata" / "config.yaml"


class TestFindProjectRoot:
    """Project root discovery."""

    def test_finds_marker_in_parent(self, tmp_path: _pathlib.Path) -> None:
        (tmp_path / "proj" / ".stepdata").mkdir(parents=True)
        nested = tmp_path / "proj" / "features" / "steps"
        nested.mkdir(parents=True)

        assert config.find_project_root(nested) == (tmp_path / "proj").resolve()

    def test_pyproject_marker(self, tmp_path: _pathlib.Path) -> None:
        (tmp_path / "pyproject.toml").write_text("", encoding="utf-8")
        nested = tmp_path / "src"
        nested.mkdir()

        assert config.find_project_root(nested) == tmp_path.resolve()

    def test_defaults_to_cwd(self) -> None:
        assert config.find_project_root() == _pathlib.Path.cwd().resolve()


class TestLoadYamlFile:
    """Single-file loading and its errors."""

    def test_loads_mapping(self, tmp_path: _pathlib.Path) -> None:
        path = _write_yaml(tmp_path / "c.yaml", "a:\n  b: 1\n")

        assert sources.load_yaml_file(path) == {"a": {"b": 1}}

    def test_empty_file(self, tmp_path: _pathlib.Path) -> None:
        path = _write_yaml(tmp_path / "c.yaml", "")

        assert sources.load_yaml_file(path) is None

    def test_malformed_yaml(self, tmp_path: _pathlib.Path) -> None:
        path = _write_yaml(tmp_path / "c.yaml", "a: [unclosed\n")

        with _pytest.raises(sources.ConfigFileError, match="invalid YAML") as exc_info:
            sources.load_yaml_file(path)

        assert exc_info.value.path == path

    def test_non_mapping(self, tmp_path: _pathlib.Path) -> None:
        path = _write_yaml(tmp_path / "c.yaml", "- a\n- b\n")

        with _pytest.raises(sources.ConfigFileError, match="mapping"):
            sources.load_yaml_file(path)

    def test_unreadable(self, tmp_path: _pathlib.Path) -> None:
        with _pytest.raises(sources.ConfigFileError, match="cannot read"):
            sources.load_yaml_file(tmp_path / "missing.yaml")


class MinimalSettings(_pydantic_settings.BaseSettings):
    """Minimal settings class for exercising the source directly."""

    model_config = _pydantic_settings.SettingsConfigDict(extra="allow")


class TestLayeredYamlSettingsSource:
    """Layer loading and deep merging."""

    def test_is_pydantic_settings_source(self) -> None:
        assert issubclass(
            sources.LayeredYamlSettingsSource,
            _pydantic_settings.PydanticBaseSettingsSource,
        )

    def test_layers_merge_deeply(self, tmp_path: _pathlib.Path) -> None:
        builtin = _write_yaml(tmp_path / "builtin.yaml", "a:\n  x: 1\n  y: 1\nb: 1\n")
        user = _write_yaml(tmp_path / "user.yaml", "a:\n  y: 2\n")
        _write_yaml(tmp_path / "proj" / ".stepdata" / "config.yaml", "a:\n  z: 3\nb: 3\n")

        source = sources.LayeredYamlSettingsSource(
            MinimalSettings,
            tmp_path / "proj",
            user_config_path=user,
            builtin_config_path=builtin,
        )

        assert source() == {"a": {"x": 1, "y": 2, "z": 3}, "b": 3}
        assert [name for name, _ in source.get_loaded_layers()] == ["built-in", "user", "project"]

    def test_missing_optional_layers(self, tmp_path: _pathlib.Path) -> None:
        builtin = _write_yaml(tmp_path / "builtin.yaml", "a: 1\n")

        source = sources.LayeredYamlSettingsSource(
            MinimalSettings,
            tmp_path,
            user_config_path=tmp_path / "nope.yaml",
            builtin_config_path=builtin,
        )

        assert source() == {"a": 1}
        assert len(source.get_loaded_layers()) == 1

    def test_missing_builtin_is_an_error(self, tmp_path: _pathlib.Path) -> None:
        with _pytest.raises(sources.ConfigFileError, match="not found"):
            sources.LayeredYamlSettingsSource(
                MinimalSettings,
                builtin_config_path=tmp_path / "nope.yaml",
            )

    def test_empty_builtin_is_an_error(self, tmp_path: _pathlib.Path) -> None:
        builtin = _write_yaml(tmp_path / "builtin.yaml", "")

        with _pytest.raises(sources.ConfigFileError, match="empty"):
            sources.LayeredYamlSettingsSource(MinimalSettings, builtin_config_path=builtin)

    def test_get_field_value(self, tmp_path: _pathlib.Path) -> None:
        builtin = _write_yaml(tmp_path / "builtin.yaml", "section:\n  k: v\nflat: 1\n")
        source = sources.LayeredYamlSettingsSource(
            MinimalSettings,
            user_config_path=tmp_path / "nope.yaml",
            builtin_config_path=builtin,
        )

        field = _pydantic_fields.FieldInfo()

        assert source.get_field_value(field, "section") == ({"k": "v"}, "section", True)
        assert source.get_field_value(field, "flat") == (1, "flat", False)
        assert source.get_field_value(field, "missing") == (None, "missing", False)


class TestSettings:
    """Effective settings from defaults, files and environment."""

    def test_builtin_defaults(self) -> None:
        settings = config.Settings()

        assert settings.version == 1
        assert settings.logging.level == "info"
        assert settings.parsing.max_depth is None
        assert settings.world == {}
        assert settings.get_extra_fields() == {}

    def test_user_config_layer(self) -> None:
        user_dir = _pathlib.Path(_os.environ["STEPDATA_CONFIG_DIR"])
        _write_yaml(
            user_dir / "config.yaml",
            "logging:\n  level: debug\nworld:\n  api:\n    port: 8080\n",
        )

        settings = config.Settings()

        assert settings.logging.level == "debug"
        assert settings.world == {"api": {"port": 8080}}

    def test_project_layer_overrides_user(self) -> None:
        user_dir = _pathlib.Path(_os.environ["STEPDATA_CONFIG_DIR"])
        _write_yaml(user_dir / "config.yaml", "world:\n  env: user\n  keep: true\n")
        _write_yaml(_pathlib.Path.cwd() / ".stepdata" / "config.yaml", "world:\n  env: project\n")

        settings = config.Settings()

        assert settings.world == {"env": "project", "keep": True}

    def test_project_mapping_replaces_user_list(self) -> None:
        user_dir = _pathlib.Path(_os.environ["STEPDATA_CONFIG_DIR"])
        _write_yaml(user_dir / "config.yaml", "world:\n  users:\n    - alice\n    - bob\n")
        _write_yaml(
            _pathlib.Path.cwd() / ".stepdata" / "config.yaml",
            "world:\n  users:\n    admin: root\n",
        )

        settings = config.Settings()

        assert settings.world == {"users": {"admin": "root"}}

    def test_env_overrides_files(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        user_dir = _pathlib.Path(_os.environ["STEPDATA_CONFIG_DIR"])
        _write_yaml(user_dir / "config.yaml", "parsing:\n  max_depth: 3\n")
        monkeypatch.setenv("STEPDATA_PARSING__MAX_DEPTH", "10")
        monkeypatch.setenv("STEPDATA_LOGGING__LEVEL", "warn")

        settings = config.Settings()

        assert settings.parsing.max_depth == 10
        assert settings.logging.level == "warn"

    def test_constructor_overrides_everything(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STEPDATA_PARSING__MAX_DEPTH", "10")

        settings = config.Settings(parsing={"max_depth": 1})

        assert settings.parsing.max_depth == 1

    def test_invalid_level_rejected(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STEPDATA_LOGGING__LEVEL", "loud")

        with _pytest.raises(_pydantic.ValidationError):
            config.Settings()

    def test_negative_depth_rejected(self) -> None:
        with _pytest.raises(_pydantic.ValidationError):
            config.Settings(parsing={"max_depth": -1})

    def test_malformed_user_config(self) -> None:
        user_dir = _pathlib.Path(_os.environ["STEPDATA_CONFIG_DIR"])
        _write_yaml(user_dir / "config.yaml", "world: [unclosed\n")

        with _pytest.raises(config.ConfigFileError):
            config.Settings()

    def test_unknown_keys_are_kept(self) -> None:
        user_dir = _pathlib.Path(_os.environ["STEPDATA_CONFIG_DIR"])
        _write_yaml(user_dir / "config.yaml", "parsing:\n  max_dept: 3\ncolour: red\n")

        settings = config.Settings()

        assert settings.get_extra_fields() == {"colour": "red", "parsing.max_dept": 3}


class TestTypes:
    """Config section types."""

    def test_logging_numeric_level(self) -> None:
        assert types.LoggingConfig(level="trace").numeric_level == 5
        assert types.LoggingConfig(level=4).numeric_level == 30

    def test_extra_fields(self) -> None:
        section = types.ParsingConfig(max_depth=2, unknown=True)

        assert section.has_extra_fields()
        assert section.get_extra_fields() == {"unknown": True}
