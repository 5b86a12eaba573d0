from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from image_composer.compose.adapter import DEFAULT_MODEL
from image_composer.errors import ConfigurationError, MissingCredentialError

API_KEY_ENV = "API_KEY"
DEFAULT_INSTRUCTION = (
    "Make the person interact with or use the product naturally. "
    "Ensure the final image is realistic with correct scale, lighting, and perspective."
)


@dataclass
class LoggingConfig:
    level: str = "INFO"
    logfile: Path | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> "LoggingConfig":
        if not raw:
            return cls()
        return cls(
            level=str(raw.get("level", "INFO")).upper(),
            logfile=_optional_path(raw.get("logfile") or raw.get("file")),
        )


@dataclass
class ComposerConfig:
    api_key: str
    model: str = DEFAULT_MODEL
    default_instruction: str = DEFAULT_INSTRUCTION
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self) -> None:
        if not isinstance(self.api_key, str) or not self.api_key.strip():
            raise MissingCredentialError(f"{API_KEY_ENV} environment variable is not set.")
        self.api_key = self.api_key.strip()

    def __repr__(self) -> str:
        return (
            f"ComposerConfig(api_key='***', model={self.model!r}, "
            f"logging={self.logging!r})"
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> "ComposerConfig":
        env = os.environ if environ is None else environ
        return cls(api_key=env.get(API_KEY_ENV, ""), **overrides)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any], *, api_key: str) -> "ComposerConfig":
        if "api_key" in raw or API_KEY_ENV in raw:
            raise ConfigurationError(
                f"Configuration files must not contain the credential; use the {API_KEY_ENV} environment variable"
            )
        gemini_data = raw.get("gemini", {}) if isinstance(raw.get("gemini"), Mapping) else {}
        model = gemini_data.get("model") or raw.get("model") or DEFAULT_MODEL
        instruction = raw.get("default_instruction", gemini_data.get("default_instruction"))
        if instruction is None:
            instruction = DEFAULT_INSTRUCTION
        return cls(
            api_key=api_key,
            model=str(model),
            default_instruction=str(instruction),
            logging=LoggingConfig.from_mapping(raw.get("logging")),
        )

    def with_overrides(self, **changes: Any) -> "ComposerConfig":
        cleaned = {key: value for key, value in changes.items() if value is not None}
        return replace(self, **cleaned) if cleaned else self


def load_config(
    path: Path,
    *,
    api_key: Optional[str] = None,
    environ: Mapping[str, str] | None = None,
) -> ComposerConfig:
    """Read a YAML or JSON(C) config file; the API key comes from the environment."""

    if api_key is None:
        env = os.environ if environ is None else environ
        api_key = env.get(API_KEY_ENV, "")
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Could not read configuration file {path}: {exc}") from exc

    suffix = Path(path).suffix.lower()
    try:
        if suffix in {".json", ".jsonc"}:
            data = json.loads(_strip_jsonc(text))
        else:
            data = yaml.safe_load(text)
    except (ValueError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Invalid configuration file {path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must contain a mapping at the top level")
    return ComposerConfig.from_dict(data, api_key=api_key)


def _strip_jsonc(payload: str) -> str:
    """Drop ``//`` and ``/* */`` comments outside string literals."""

    out: list[str] = []
    i = 0
    length = len(payload)
    in_string = False
    while i < length:
        ch = payload[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < length:
                out.append(payload[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue
        if ch == '"':
            in_string = True
        elif payload.startswith("//", i):
            end = payload.find("\n", i)
            i = length if end == -1 else end
            continue
        elif payload.startswith("/*", i):
            end = payload.find("*/", i + 2)
            i = length if end == -1 else end + 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def _optional_path(value: Any) -> Path | None:
    if value in (None, "", False):
        return None
    return Path(str(value))


__all__ = [
    "API_KEY_ENV",
    "ComposerConfig",
    "DEFAULT_INSTRUCTION",
    "LoggingConfig",
    "load_config",
]
