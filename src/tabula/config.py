"""Tabula configuration system.

Configuration is YAML-based with per-run CLI overrides (--var, --output).
Supports environment variable substitution (${VAR}) in config files.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.tabula/config.yaml
3. ./tabula.yaml
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class BufferConfig:
    """Indentation applied to pushed lines.

    Attributes:
        indent_width: Indent characters per tabulation level
        indent_char: Single whitespace character used to indent
    """

    indent_width: int = 2
    indent_char: str = " "

    def __post_init__(self) -> None:
        """Validate buffer configuration."""
        if self.indent_width < 0:
            raise ValueError(f"indent_width must be >= 0 (got {self.indent_width})")
        if len(self.indent_char) != 1 or not self.indent_char.isspace():
            raise ValueError(
                f"indent_char must be a single whitespace character (got {self.indent_char!r})"
            )


@dataclass
class CaptureConfig:
    """Capture output settings.

    Attributes:
        separator: Terminator appended to every captured line
    """

    separator: str = "\n"


@dataclass
class ListConfig:
    """Markers used by list_of.

    Attributes:
        open_marker: Text placed before each rendered item
        close_marker: Text placed after each rendered item
        separator: Text placed between wrapped items
    """

    open_marker: str = "<li>"
    close_marker: str = "</li>"
    separator: str = "\n"


@dataclass
class HostConfig:
    """Host view environment switch.

    Attributes:
        enabled: A host view layer drives rendering
        force_disabled: Suppress host extensions even when enabled
    """

    enabled: bool = False
    force_disabled: bool = False

    @property
    def active(self) -> bool:
        """Return True if host extensions should be composed in."""
        return self.enabled and not self.force_disabled


@dataclass
class TemplateConfig:
    """Template loading settings.

    Attributes:
        search_path: Directories searched for template files
        autoescape_extensions: File extensions rendered with autoescaping
    """

    search_path: list[str] = field(default_factory=lambda: ["templates"])
    autoescape_extensions: list[str] = field(default_factory=list)


@dataclass
class TabulaConfig:
    """Top-level Tabula configuration.

    Attributes:
        buffer: Indentation settings
        capture: Capture join settings
        lists: list_of markers
        host: Host view environment switch
        templates: Template loading
    """

    buffer: BufferConfig = field(default_factory=BufferConfig)
    capture: CaptureConfig = field(default_factory=CaptureConfig)
    lists: ListConfig = field(default_factory=ListConfig)
    host: HostConfig = field(default_factory=HostConfig)
    templates: TemplateConfig = field(default_factory=TemplateConfig)

    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path


# =============================================================================
# Environment Variable Substitution
# =============================================================================


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax for environment variable substitution.

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted
    """
    if isinstance(value, str):
        pattern = re.compile(r"\$\{([^}]+)\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable not set: {var_name}")
            return env_value

        return pattern.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Search order:
    1. ./.tabula/config.yaml
    2. ./tabula.yaml

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".tabula" / "config.yaml",
        start_path / "tabula.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def load_config_from_dict(data: dict[str, Any]) -> TabulaConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        TabulaConfig instance
    """
    data = substitute_env_vars(data)

    config = TabulaConfig()

    if "buffer" in data:
        buffer_data = data["buffer"]
        config.buffer = BufferConfig(
            indent_width=int(buffer_data.get("indent_width", config.buffer.indent_width)),
            indent_char=buffer_data.get("indent_char", config.buffer.indent_char),
        )

    if "capture" in data:
        capture_data = data["capture"]
        config.capture = CaptureConfig(
            separator=capture_data.get("separator", config.capture.separator),
        )

    if "lists" in data:
        lists_data = data["lists"]
        config.lists = ListConfig(
            open_marker=lists_data.get("open_marker", config.lists.open_marker),
            close_marker=lists_data.get("close_marker", config.lists.close_marker),
            separator=lists_data.get("separator", config.lists.separator),
        )

    if "host" in data:
        host_data = data["host"]
        config.host = HostConfig(
            enabled=bool(host_data.get("enabled", False)),
            force_disabled=bool(host_data.get("force_disabled", False)),
        )

    if "templates" in data:
        templates_data = data["templates"]
        search_path = templates_data.get("search_path", config.templates.search_path)
        if isinstance(search_path, str):
            search_path = [search_path]
        config.templates = TemplateConfig(
            search_path=list(search_path),
            autoescape_extensions=list(templates_data.get("autoescape_extensions", [])),
        )

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> TabulaConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        TabulaConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is not None:
        with open(found_path) as f:
            data = yaml.safe_load(f) or {}
        config = load_config_from_dict(data)
        config._config_path = found_path
    else:
        config = TabulaConfig()

    return config


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    return '''# Tabula Configuration

# Indentation of pushed lines
buffer:
  indent_width: 2
  indent_char: " "

# Captured blocks: terminator appended to every captured line
capture:
  separator: "\\n"

# Markers used by list_of
lists:
  open_marker: "<li>"
  close_marker: "</li>"
  separator: "\\n"

# Host view environment (enables host extensions such as concat)
host:
  enabled: false
  force_disabled: false

# Template loading
templates:
  search_path:
    - "templates"
  autoescape_extensions: []
'''
