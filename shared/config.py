"""
AdScope Configuration Management
=================================

Centralized configuration using Python dataclasses and TOML-based
persistence. Every setting has a default, so a missing file or a
partial file is always usable.

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[no-redef]


# ---------------------------------------------------------------------------
# Default configuration file path relative to the project root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "config.toml"

SCANNING_MODES: tuple[str, ...] = ("active", "passive")
OUTPUT_FORMATS: tuple[str, ...] = ("text", "json")


@dataclass(frozen=False, slots=True)
class ScanConfig:
    """Configuration for live scanning and record output.

    ``duration`` of 0 keeps scanning until the process is interrupted.
    """

    duration: int = 0
    scanning_mode: str = "active"
    output_format: str = "text"
    show_summary: bool = True


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Global settings: logging verbosity and destinations."""

    log_level: str = "WARNING"
    log_file: str = ""
    log_json: bool = False
    debug: bool = False


@dataclass(frozen=False, slots=True)
class AdScopeConfig:
    """Master configuration aggregating global and scan settings.

    Usage:
        >>> config = AdScopeConfig.load()                  # from default path
        >>> config = AdScopeConfig.load("custom.toml")     # from custom path
        >>> config.scan.scanning_mode
        'active'
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)

    @classmethod
    def load(cls, path: str | Path | None = None) -> AdScopeConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``config.toml`` in the
        project root. Missing keys fall back to dataclass defaults.

        Raises:
            FileNotFoundError: If the specified path does not exist
                *and* was explicitly provided by the caller.
            ValueError: If ``scanning_mode`` or ``output_format`` hold
                an unsupported value.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        config = cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            scan=cls._build_section(ScanConfig, raw.get("scan", {})),
        )
        config.validate()
        return config

    def validate(self) -> None:
        if self.scan.scanning_mode not in SCANNING_MODES:
            raise ValueError(
                f"scan.scanning_mode must be one of {SCANNING_MODES}, "
                f"got {self.scan.scanning_mode!r}"
            )
        if self.scan.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"scan.output_format must be one of {OUTPUT_FORMATS}, "
                f"got {self.scan.output_format!r}"
            )
        if self.scan.duration < 0:
            raise ValueError("scan.duration must not be negative")

    def to_dict(self) -> dict[str, Any]:
        """Serialise the entire configuration tree to a plain dictionary."""
        return asdict(self)

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares.

        Unknown keys in the TOML source are ignored so that
        forward-compatible config files do not break older code.
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)


def get_config(path: str | Path | None = None) -> AdScopeConfig:
    """Module-level convenience wrapper around :meth:`AdScopeConfig.load`.

    Caches the result so that repeated calls share one instance.
    """
    if not hasattr(get_config, "_cached") or path is not None:
        get_config._cached = AdScopeConfig.load(path)  # type: ignore[attr-defined]
    return get_config._cached  # type: ignore[attr-defined]
