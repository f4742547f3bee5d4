"""Configuration loading and management for xsdiff.

Configuration sources are merged in priority order:
    1. Defaults (defined in DiffConfig)
    2. Global config (~/.xsdiff.toml)
    3. Project config (./xsdiff.toml)
    4. Explicit config file
    5. Environment variables (XSDIFF_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(verbose=True, report_format="html")
    >>> config.verbosity
    'verbose'
    >>> config.report_format
    'html'
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import InvalidConfigError, XsDiffError

Verbosity = Literal["quiet", "normal", "verbose"]
ReportFormat = Literal["text", "html", "rich"]

REPORT_FORMATS = ("text", "html", "rich")


@dataclass(frozen=True)
class DiffConfig:
    """Settings for one comparison run.

    Attributes:
        Aggregation:
            min_holder_depth: Parent paths shallower than this are never
                grouped; their changes are reported inline only
            context_depth: Paths deeper than this are displayed through
                their parent node

        Comparison:
            ignore_whitespace: Drop whitespace-only text and normalise
                runs of whitespace before comparing text values
            ignore_comments: Skip comments and processing instructions
            match_attribute: Attribute that identifies sibling elements
                with the same tag (XSD components are named by ``name``)

        Output:
            report_format: text, html or rich
            verbosity: Logging verbosity level
    """

    min_holder_depth: int = 2
    context_depth: int = 2

    ignore_whitespace: bool = True
    ignore_comments: bool = True
    match_attribute: str = "name"

    report_format: ReportFormat = "text"
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.min_holder_depth < 1:
            raise InvalidConfigError("min_holder_depth", self.min_holder_depth, "must be at least 1")
        if self.context_depth < 1:
            raise InvalidConfigError("context_depth", self.context_depth, "must be at least 1")
        if self.report_format not in REPORT_FORMATS:
            raise InvalidConfigError(
                "report_format",
                self.report_format,
                f"must be one of: {', '.join(REPORT_FORMATS)}",
            )
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError(
                "verbosity", self.verbosity, "must be one of: quiet, normal, verbose"
            )


DEFAULT_CONFIG = DiffConfig()


def load_config(config_file: Optional[Path] = None, **overrides) -> DiffConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``verbose``
            and ``quiet`` booleans are translated to ``verbosity``; ``None``
            values are ignored.

    Returns:
        Validated DiffConfig instance

    Raises:
        XsDiffError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / ".xsdiff.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except Exception as e:
            raise XsDiffError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "xsdiff.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except Exception as e:
            raise XsDiffError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise XsDiffError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except Exception as e:
            raise XsDiffError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return DiffConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise XsDiffError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from XSDIFF_* environment variables.

    Every DiffConfig field can be set, e.g. XSDIFF_MIN_HOLDER_DEPTH=3 or
    XSDIFF_IGNORE_COMMENTS=false.
    """
    type_hints = get_type_hints(DiffConfig)

    result: dict[str, Any] = {}

    for field_name in DiffConfig.__dataclass_fields__:
        env_key = f"XSDIFF_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise XsDiffError(f"Invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    # String (including Literal types like Verbosity)
    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        XsDiffError: If tomllib/tomli not available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise XsDiffError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        data = tomllib.load(f)

    # Settings may live at top level or under an [xsdiff] table
    return data.get("xsdiff", data)
