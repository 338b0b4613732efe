"""Load PawprintConfig from pawprint.yaml / pawprint.toml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import yaml

from pawprint._errors import ConfigurationError
from pawprint.config import PawprintConfig

_CONFIG_KEYS: frozenset[str] = frozenset({
    "components_dir",
    "pages_dir",
    "dest_dir",
    "options",
    "fragment_glob",
    "page_glob",
})


def load_config(root: Path, **overrides: object) -> PawprintConfig:
    """Load PawprintConfig from root, optionally merging pawprint.yaml.

    Looks for pawprint.yaml, pawprint.yml, or pawprint.toml in root. If found,
    loads and merges with overrides. Overrides that are ``None`` are ignored
    so that unset CLI flags do not mask file values.

    Raises:
        ConfigurationError: If the config file is malformed or holds
            unknown keys, or if the merged values fail validation.

    """
    file_config = _read_config_file(root)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}

    # Options given piecemeal on the command line merge into the file's options
    flat = {key: merged.pop(key) for key in ("concurrency", "timeout") if key in merged}
    if flat:
        options = merged.get("options") or {}
        if not isinstance(options, dict):
            msg = f"options must be a mapping, got {type(options).__name__}"
            raise ConfigurationError(msg)
        merged["options"] = {**options, **flat}

    unknown = sorted(set(merged) - _CONFIG_KEYS)
    if unknown:
        msg = f"Unknown configuration key(s): {', '.join(unknown)}"
        raise ConfigurationError(msg)

    if "dest_dir" in merged and not isinstance(merged["dest_dir"], Path):
        merged["dest_dir"] = Path(str(merged["dest_dir"]))
    return PawprintConfig(root=root, **merged)  # type: ignore[arg-type]


def _read_config_file(root: Path) -> dict[str, object]:
    """Read pawprint config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("pawprint.yaml", "pawprint.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "pawprint.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Failed to read {path}: {exc}"
        raise ConfigurationError(msg) from exc
    return _flatten_pawprint_section(data, path)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"Failed to read {path}: {exc}"
        raise ConfigurationError(msg) from exc
    return _flatten_pawprint_section(data, path)


def _flatten_pawprint_section(data: object, path: Path) -> dict[str, object]:
    """Extract pawprint.* keys into top-level config."""
    if not isinstance(data, dict):
        msg = f"{path}: expected a mapping at the top level"
        raise ConfigurationError(msg)
    result: dict[str, object] = {}
    section = data.get("pawprint")
    if isinstance(section, dict):
        result.update(section)
    for k, v in data.items():
        if k != "pawprint":
            result[k] = v
    return result
