from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import jsonschema
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .cache import DEFAULT_HIT_FACTOR, DEFAULT_PRUNE_THRESHOLD
from .diagnostics import ConfigError, Diagnostic, Diagnostics
from .scheduler import DEFAULT_RESUME_DELAY


DEFAULT_ENGINE_CONFIG: Dict[str, Any] = {
    "engine": {
        "caching": False,
        "resume_delay_seconds": DEFAULT_RESUME_DELAY,
        "log_level": "INFO",
        "logs_dir": None,
    },
    "cache": {
        "prune_threshold_seconds": DEFAULT_PRUNE_THRESHOLD,
        "hit_factor": DEFAULT_HIT_FACTOR,
    },
    "space": {"type": "grid2d", "options": {}},
}


class EngineSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")
    caching: bool = False
    resume_delay_seconds: float = Field(default=DEFAULT_RESUME_DELAY, ge=0)
    log_level: str = "INFO"
    logs_dir: Optional[Path] = None


class CacheSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")
    prune_threshold_seconds: float = Field(default=DEFAULT_PRUNE_THRESHOLD, gt=0)
    hit_factor: float = Field(default=DEFAULT_HIT_FACTOR, ge=0)


class SpaceSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")
    type: str = "grid2d"
    options: Dict[str, Any] = Field(default_factory=dict)


class AstarConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    engine: EngineSettings = Field(default_factory=EngineSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    space: SpaceSettings = Field(default_factory=SpaceSettings)


def load_engine_config(path: Path) -> Dict[str, Any]:
    data = _load_data(Path(path))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            Diagnostic(
                code="E-CONFIG-TYPE",
                message="Engine config must be a mapping",
                location=str(path),
            )
        )
    return data


def normalize_engine_config(config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    merged = json.loads(json.dumps(DEFAULT_ENGINE_CONFIG))
    return _deep_merge(merged, config or {})


def validate_engine_config(config: Dict[str, Any], schema_path: Optional[Path] = None) -> Diagnostics:
    diagnostics = Diagnostics()
    schema_path = schema_path or default_schema_path()
    with schema_path.open("r", encoding="utf-8") as handle:
        schema = json.load(handle)
    schema["$id"] = schema_path.resolve().as_uri()
    validator = jsonschema.Draft202012Validator(schema)
    for error in sorted(validator.iter_errors(config), key=str):
        diagnostics.add(
            Diagnostic(
                code="E-CONFIG-SCHEMA",
                message=error.message,
                location="/".join(str(x) for x in error.path),
            )
        )
    return diagnostics


def parse_engine_config(config: Optional[Dict[str, Any]]) -> Tuple[AstarConfig, Diagnostics]:
    normalized = normalize_engine_config(config)
    diagnostics = validate_engine_config(normalized)
    if diagnostics.has_errors():
        return AstarConfig(), diagnostics
    try:
        return AstarConfig.model_validate(normalized), diagnostics
    except ValidationError as exc:
        for error in exc.errors():
            diagnostics.add(
                Diagnostic(
                    code="E-CONFIG-MODEL",
                    message=error.get("msg", "invalid value"),
                    location="/".join(str(x) for x in error.get("loc", ())),
                )
            )
        return AstarConfig(), diagnostics


def settings_from_config(config: Optional[Dict[str, Any]]) -> AstarConfig:
    settings, diagnostics = parse_engine_config(config)
    diagnostics.raise_for_errors()
    return settings


def default_schema_path() -> Path:
    return Path(__file__).resolve().parent.parent / "schemas" / "engine.schema.json"


def collect_space_options(config: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
    space = config.get("space") or {}
    if not isinstance(space, dict):
        return "grid2d", {}
    return str(space.get("type") or "grid2d"), dict(space.get("options") or {})


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _load_data(path: Path) -> Any:
    if path.suffix in {".yaml", ".yml"}:
        import yaml  # type: ignore

        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle)
    if path.suffix == ".toml":
        try:
            import tomllib
        except ImportError:  # pragma: no cover - python <3.11
            import tomli as tomllib  # type: ignore

        with path.open("rb") as handle:
            return tomllib.load(handle)
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)

