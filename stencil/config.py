from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import TemplateError
from .trim import PRESETS, NOTHING, Trim, TrimBehaviour

SCHEMA_VERSION = 1
DEFAULT_CFG_FILE = "stencil.yaml"

# --------------------------------------------------------------------------- #
# ДЕФОЛТЫ
# --------------------------------------------------------------------------- #
_DEFAULT_CFG: Dict[str, Any] = {
    "schema_version": SCHEMA_VERSION,
    "template_dirs": ["templates"],
    "trim_behaviour": "nothing",
}

# --------------------------------------------------------------------------- #
# YAML loader
# --------------------------------------------------------------------------- #
_yaml = YAML(typ="safe")


class ConfigError(TemplateError):
    """Некорректный файл конфигурации окружения."""
    pass


@dataclass(frozen=True)
class EnvironmentConfig:
    """Разобранная конфигурация окружения шаблонов."""
    template_dirs: List[Path] = field(default_factory=list)
    trim_behaviour: TrimBehaviour = NOTHING


# --------------------------------------------------------------------------- #
# HELPERS
# --------------------------------------------------------------------------- #
def _merge_defaults(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Накладываем значения пользователя поверх дефолтов."""
    cfg = _DEFAULT_CFG.copy()
    cfg.update(raw)                      # пользовательские ключи перекрывают
    return cfg


def _parse_trim(name: Any) -> Trim:
    try:
        return Trim(name)
    except ValueError:
        allowed = ", ".join(trim.value for trim in Trim)
        raise ConfigError(f"Unknown trim rule {name!r} (expected one of: {allowed})") from None


def parse_trim_behaviour(value: Any) -> TrimBehaviour:
    """
    Разбирает значение `trim_behaviour`.

    Допустимы имя пресета (`nothing`, `smart`, `all`) или словарь
    с ключами `leading` и `trailing`, например:

        trim_behaviour:
          leading: whitespace
          trailing: whitespace_and_one_newline
    """
    if isinstance(value, str):
        if value not in PRESETS:
            raise ConfigError(
                f"Unknown trim_behaviour preset {value!r} (expected one of: {', '.join(PRESETS)})"
            )
        return PRESETS[value]

    if isinstance(value, Mapping):
        unknown = set(value) - {"leading", "trailing"}
        if unknown:
            raise ConfigError(f"Unknown trim_behaviour keys: {', '.join(sorted(map(str, unknown)))}")
        return TrimBehaviour(
            leading=_parse_trim(value.get("leading", Trim.NOTHING.value)),
            trailing=_parse_trim(value.get("trailing", Trim.NOTHING.value)),
        )

    raise ConfigError(f"trim_behaviour must be a preset name or a mapping, got {type(value).__name__}")


def _parse_template_dirs(value: Any, base: Path) -> List[Path]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError("template_dirs must be a string or a list of strings")
    return [(base / item).resolve() for item in value]


# --------------------------------------------------------------------------- #
# PUBLIC API
# --------------------------------------------------------------------------- #
def load_config(path: Optional[Path] = None) -> EnvironmentConfig:
    """
    Загрузить конфигурацию окружения из YAML.

    • Если путь не задан, ищем stencil.yaml в текущем каталоге.
    • Если файла нет, вернуть дефолты.
    • Если schema_version отсутствует, считаем, что это актуальная версия.
    • Пути template_dirs считаются относительно каталога файла.
    """
    path = Path(path) if path is not None else Path.cwd() / DEFAULT_CFG_FILE
    base = path.parent

    if not path.exists():
        cfg = _DEFAULT_CFG.copy()
    else:
        try:
            with path.open(encoding="utf-8") as f:
                raw = _yaml.load(f) or {}
        except YAMLError as e:
            raise ConfigError(f"Failed to parse {path}: {e}") from e

        if not isinstance(raw, dict):
            raise ConfigError(f"Config {path} must contain a mapping at the top level")

        if raw.get("schema_version", SCHEMA_VERSION) != SCHEMA_VERSION:
            raise ConfigError(
                f"Unsupported config schema {raw.get('schema_version')} "
                f"(stencil expects {SCHEMA_VERSION})"
            )

        cfg = _merge_defaults(raw)

    return EnvironmentConfig(
        template_dirs=_parse_template_dirs(cfg["template_dirs"], base),
        trim_behaviour=parse_trim_behaviour(cfg["trim_behaviour"]),
    )


__all__ = [
    "SCHEMA_VERSION",
    "DEFAULT_CFG_FILE",
    "ConfigError",
    "EnvironmentConfig",
    "load_config",
    "parse_trim_behaviour",
]
