"""
Minifier configuration.

Loaded from ``assetmin.toml``:

    [assetmin]
    base_dir = "assets"
    ledger = "etc/timestamp"
    audit_log = ".assetmin/audit.log"
    output_name = "main"
    append_version = true
    verbose = true

    [assetmin.dirs.js]
    input = "src/js"
    output = "public/js"

Relative paths are resolved against the directory holding the config file.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .errors import ConfigError, UnknownKindError
from .models import AssetKind

CONFIG_FILENAME = "assetmin.toml"


@dataclass(frozen=True)
class KindDirs:
    input: Path | None = None
    output: Path | None = None


@dataclass(frozen=True)
class MinifierConfig:
    base_dir: Path = Path("assets")
    ledger_path: Path = Path("etc/timestamp")
    audit_log_path: Path = Path(".assetmin/audit.log")
    output_name: str = "main"
    append_version: bool = True
    verbose: bool = True
    dirs: dict[AssetKind, KindDirs] = field(default_factory=dict)

    def input_dir(self, kind: AssetKind) -> Path:
        """Source directory for a kind (``<base>/<kind>/`` unless overridden)."""
        override = self.dirs.get(kind)
        if override and override.input:
            return override.input
        return self.base_dir / kind.value

    def output_dir(self, kind: AssetKind) -> Path:
        """Artifact directory for a kind (``<base>/live<kind>/`` unless overridden)."""
        override = self.dirs.get(kind)
        if override and override.output:
            return override.output
        return self.base_dir / f"live{kind.value}"

    def with_overrides(self, **changes: Any) -> MinifierConfig:
        """Copy with the non-None values in ``changes`` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _path(raw: Any, root: Path, name: str) -> Path:
    if not isinstance(raw, str) or not raw.strip():
        raise ConfigError(f"{name} must be a non-empty string")
    path = Path(raw.strip())
    return path if path.is_absolute() else root / path


def _bool(raw: Any, name: str) -> bool:
    if not isinstance(raw, bool):
        raise ConfigError(f"{name} must be true or false")
    return raw


def load_config(path: Path) -> MinifierConfig:
    """Load configuration from a TOML file."""
    import tomllib

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    root = path.resolve().parent
    section = _coerce_dict(data.get("assetmin"))
    config = MinifierConfig(
        base_dir=root / "assets",
        ledger_path=root / "etc" / "timestamp",
        audit_log_path=root / ".assetmin" / "audit.log",
    )
    changes: dict[str, Any] = {}

    if "base_dir" in section:
        changes["base_dir"] = _path(section["base_dir"], root, "base_dir")
    if "ledger" in section:
        changes["ledger_path"] = _path(section["ledger"], root, "ledger")
    if "audit_log" in section:
        changes["audit_log_path"] = _path(section["audit_log"], root, "audit_log")
    if "output_name" in section:
        output_name = section["output_name"]
        if not isinstance(output_name, str) or not output_name.strip():
            raise ConfigError("output_name must be a non-empty string")
        changes["output_name"] = output_name.strip()
    if "append_version" in section:
        changes["append_version"] = _bool(section["append_version"], "append_version")
    if "verbose" in section:
        changes["verbose"] = _bool(section["verbose"], "verbose")

    dirs: dict[AssetKind, KindDirs] = {}
    for kind_name, raw in _coerce_dict(section.get("dirs")).items():
        try:
            kind = AssetKind.parse(kind_name)
        except UnknownKindError as e:
            raise ConfigError(f"dirs.{kind_name}: {e}") from e
        raw = _coerce_dict(raw)
        dirs[kind] = KindDirs(
            input=_path(raw["input"], root, f"dirs.{kind.value}.input") if "input" in raw else None,
            output=_path(raw["output"], root, f"dirs.{kind.value}.output") if "output" in raw else None,
        )
    if dirs:
        changes["dirs"] = dirs

    return replace(config, **changes)


def find_config(start: Path) -> Path | None:
    """Find ``assetmin.toml`` by walking up from ``start``."""
    cur = start.resolve()
    for p in (cur, *cur.parents):
        candidate = p / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
