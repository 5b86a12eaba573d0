from __future__ import annotations

from pathlib import Path

import pytest

from image_composer.compose.adapter import DEFAULT_MODEL
from image_composer.config import DEFAULT_INSTRUCTION, ComposerConfig, load_config
from image_composer.errors import ConfigurationError, MissingCredentialError
from image_composer.factory import create_composer

from conftest import FakeClient


def test_from_env_reads_api_key() -> None:
    config = ComposerConfig.from_env({"API_KEY": "  secret  "})

    assert config.api_key == "secret"
    assert config.model == DEFAULT_MODEL
    assert config.default_instruction == DEFAULT_INSTRUCTION
    assert "secret" not in repr(config)


@pytest.mark.parametrize("environ", [{}, {"API_KEY": ""}, {"API_KEY": "   "}])
def test_missing_api_key_is_fatal(environ: dict[str, str]) -> None:
    with pytest.raises(MissingCredentialError) as excinfo:
        ComposerConfig.from_env(environ)

    assert "API_KEY" in str(excinfo.value)


def test_load_yaml_config(tmp_path: Path) -> None:
    path = tmp_path / "composer.yaml"
    path.write_text(
        """
gemini:
  model: gemini-test-image
default_instruction: Put the product on the table.
logging:
  level: debug
  logfile: logs/composer.log
""",
        encoding="utf-8",
    )

    config = load_config(path, environ={"API_KEY": "k"})

    assert config.model == "gemini-test-image"
    assert config.default_instruction == "Put the product on the table."
    assert config.logging.level == "DEBUG"
    assert config.logging.logfile == Path("logs/composer.log")


def test_load_jsonc_config(tmp_path: Path) -> None:
    path = tmp_path / "composer.jsonc"
    path.write_text(
        """
        {
          // model override
          "model": "gemini-jsonc",
          /* keep the URL-ish text intact */
          "default_instruction": "see http://example.com // not a comment"
        }
        """,
        encoding="utf-8",
    )

    config = load_config(path, api_key="k")

    assert config.model == "gemini-jsonc"
    assert config.default_instruction == "see http://example.com // not a comment"
    assert config.logging.level == "INFO"


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    config = load_config(path, api_key="k")

    assert config.model == DEFAULT_MODEL


def test_config_file_without_env_key_is_fatal(tmp_path: Path) -> None:
    path = tmp_path / "composer.yaml"
    path.write_text("model: x\n", encoding="utf-8")

    with pytest.raises(MissingCredentialError):
        load_config(path, environ={})


def test_config_file_must_not_hold_credential(tmp_path: Path) -> None:
    path = tmp_path / "composer.yaml"
    path.write_text("api_key: leaked\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_config(path, api_key="k")


@pytest.mark.parametrize(("name", "body"), [("bad.yaml", "- just\n- a list\n"), ("bad.json", "{not json")])
def test_invalid_config_files(tmp_path: Path, name: str, body: str) -> None:
    path = tmp_path / name
    path.write_text(body, encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_config(path, api_key="k")


def test_unreadable_config_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        load_config(tmp_path / "absent.yaml", api_key="k")


def test_with_overrides_ignores_none() -> None:
    config = ComposerConfig(api_key="k")

    assert config.with_overrides(model=None) is config
    assert config.with_overrides(model="other").model == "other"


def test_create_composer_uses_configured_model() -> None:
    client = FakeClient()
    composer = create_composer(ComposerConfig(api_key="k", model="m"), client=client)

    assert composer.client is client
    assert composer.model == "m"
