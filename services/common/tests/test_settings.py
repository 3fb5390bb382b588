"""
Tests for the environment-backed settings base class.
"""

from typing import List, Optional

import pytest

from services.common.settings import (
    AliasChoices,
    BaseSettings,
    SettingsConfigDict,
    field,
)


class ExampleSettings(BaseSettings):
    db_url: str = field(
        default="sqlite:///./example.db",
        validation_alias=AliasChoices("DB_URL_EXAMPLE", "DATABASE_URL"),
    )
    workers: int = field(default=2)
    enabled: bool = field(default=False)
    ratio: float = field(default=0.5)
    tags: List[str] = field(default_factory=list)
    owner: Optional[int] = field(default=None)
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=None, case_sensitive=False)


class RequiredSettings(BaseSettings):
    api_token: str = field(...)

    model_config = SettingsConfigDict(env_file=None)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "DB_URL_EXAMPLE",
        "DATABASE_URL",
        "WORKERS",
        "ENABLED",
        "RATIO",
        "TAGS",
        "OWNER",
        "LOG_LEVEL",
        "API_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(name.lower(), raising=False)


class TestAliasChoices:
    def test_alias_choices_creation(self):
        choices = AliasChoices("choice1", "choice2", "choice3")
        assert choices.choices == ["choice1", "choice2", "choice3"]

    def test_alias_choices_empty(self):
        assert AliasChoices().choices == []


class TestBaseSettings:
    def test_defaults(self):
        settings = ExampleSettings()

        assert settings.db_url == "sqlite:///./example.db"
        assert settings.workers == 2
        assert settings.enabled is False
        assert settings.tags == []
        assert settings.owner is None
        assert settings.log_level == "INFO"

    def test_first_alias_wins(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:///second.db")
        monkeypatch.setenv("DB_URL_EXAMPLE", "sqlite:///first.db")

        assert ExampleSettings().db_url == "sqlite:///first.db"

    def test_field_name_is_used_as_env_name(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        assert ExampleSettings().log_level == "DEBUG"

    def test_lowercase_env_names_when_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("workers", "8")

        assert ExampleSettings().workers == 8

    @pytest.mark.parametrize(
        "raw, expected",
        [("true", True), ("1", True), ("yes", True), ("false", False), ("0", False)],
    )
    def test_bool_conversion(self, monkeypatch, raw, expected):
        monkeypatch.setenv("ENABLED", raw)

        assert ExampleSettings().enabled is expected

    def test_numeric_list_and_optional_conversion(self, monkeypatch):
        monkeypatch.setenv("RATIO", "0.25")
        monkeypatch.setenv("TAGS", "a, b,,c")
        monkeypatch.setenv("OWNER", "42")

        settings = ExampleSettings()

        assert settings.ratio == 0.25
        assert settings.tags == ["a", "b", "c"]
        assert settings.owner == 42

    def test_json_list(self, monkeypatch):
        monkeypatch.setenv("TAGS", '["x", "y"]')

        assert ExampleSettings().tags == ["x", "y"]

    def test_keyword_arguments_override_environment(self, monkeypatch):
        monkeypatch.setenv("WORKERS", "8")

        assert ExampleSettings(workers=3).workers == 3

    def test_env_file(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text('# comment\nWORKERS=5\nDB_URL_EXAMPLE="sqlite:///file.db"\n')

        class FileSettings(ExampleSettings):
            model_config = SettingsConfigDict(env_file=str(env_file))

        settings = FileSettings()

        assert settings.workers == 5
        assert settings.db_url == "sqlite:///file.db"

    def test_environment_beats_env_file(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text("WORKERS=5\n")
        monkeypatch.setenv("WORKERS", "9")

        class FileSettings(ExampleSettings):
            model_config = SettingsConfigDict(env_file=str(env_file))

        assert FileSettings().workers == 9

    def test_missing_required_field(self):
        with pytest.raises(ValueError, match="api_token"):
            RequiredSettings()

    def test_required_field_from_environment(self, monkeypatch):
        monkeypatch.setenv("API_TOKEN", "secret")

        assert RequiredSettings().api_token == "secret"
