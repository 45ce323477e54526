"""Configuration loading and management."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

_ENVIRONMENT_NAME = re.compile(r"^[A-Za-z]+\*?$")


@dataclass
class TexConfig:
    """Configuration for converting markdown documents to LaTeX.

    Attributes:
        heading_commands: Sectioning commands for heading levels 2 through 5.
        quote_environment: Environment wrapping block quotes.
        code_environment: Environment wrapping fenced code blocks.
        default_alignment: Column specifier used when a table header cell
            carries no alignment annotation.
        source_dir: Directory holding the documents converted by ``build``.
        documents: Stems of the documents converted by ``build``.
        main_document: LaTeX file typeset after conversion.
        latex_engine: Command running the LaTeX engine.
        bibtex_command: Command running the bibliography pass.
        max_file_size: Maximum file size in bytes that will be processed.
        max_line_length: Maximum line length allowed during conversion.

    Examples:
        TexConfig(heading_commands=("section", "subsection", "subsubsection", "paragraph"))
    """

    # LaTeX output
    heading_commands: tuple[str, ...] = ("chapter", "section", "subsection", "subsubsection")
    quote_environment: str = "displayquote"
    code_environment: str = "lstlisting"
    default_alignment: str = "l"

    # Build
    source_dir: str = ".."
    documents: tuple[str, ...] = ("content", "abstract")
    main_document: str = "paper.tex"
    latex_engine: str = "xelatex"
    bibtex_command: str = "bibtex"

    # Limits
    max_file_size: int = 10 * 1024 * 1024
    max_line_length: int = 10_000


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`heading_commands` must list exactly 4 commands")
    """


def load_config(search_path: Path) -> TexConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.md-to-tex]`` table from `pyproject.toml` and the
    ``[md-to-tex]`` or ``[tool.md-to-tex]`` table from `.md-to-tex.toml`
    when present. Returns default values when no configuration is found. TOML
    files that cannot be read or decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        TexConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("paper"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "md-to-tex")]
        )
        if pyproject_config is not None:
            return normalize_config(pyproject_config)

        dotfile_config = _load_from_file(
            current / ".md-to-tex.toml",
            table_paths=[("md-to-tex",), ("tool", "md-to-tex")],
        )
        if dotfile_config is not None:
            return normalize_config(dotfile_config)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return TexConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> TexConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> TexConfig:
    table_display = ".".join(table_path)

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return TexConfig()

    try:
        return TexConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def normalize_config(config: TexConfig) -> TexConfig:
    """Coerce TOML arrays into tuples and trim the alignment specifier."""
    heading_commands = config.heading_commands
    if isinstance(heading_commands, list):
        heading_commands = tuple(heading_commands)

    documents = config.documents
    if isinstance(documents, list):
        documents = tuple(documents)

    default_alignment = config.default_alignment
    if isinstance(default_alignment, str):
        default_alignment = default_alignment.strip()

    return replace(
        config,
        heading_commands=heading_commands,
        documents=documents,
        default_alignment=default_alignment,
    )


def validate_config(config: TexConfig) -> None:
    """Validate a `TexConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If command or environment names are malformed, required
            fields are empty, or numeric limits are non-positive.

    Examples:
        validate_config(TexConfig(default_alignment="c"))
    """
    config = normalize_config(config)

    _ensure_integers(
        {
            "max_file_size": config.max_file_size,
            "max_line_length": config.max_line_length,
        }
    )

    if not isinstance(config.heading_commands, tuple) or len(config.heading_commands) != 4:
        raise ConfigError("`heading_commands` must list exactly 4 commands")
    for command in config.heading_commands:
        if not isinstance(command, str) or not _ENVIRONMENT_NAME.match(command):
            raise ConfigError(f"`heading_commands` contains an invalid command: {command!r}")

    for key in ("quote_environment", "code_environment"):
        value = getattr(config, key)
        if not isinstance(value, str) or not _ENVIRONMENT_NAME.match(value):
            raise ConfigError(f"`{key}` must be a LaTeX environment name")

    for key in ("default_alignment", "main_document", "latex_engine", "bibtex_command"):
        value = getattr(config, key)
        if not isinstance(value, str) or not value:
            raise ConfigError(f"`{key}` must not be empty")

    if not isinstance(config.source_dir, str):
        raise ConfigError("`source_dir` must be a string")
    if not isinstance(config.documents, tuple) or not config.documents:
        raise ConfigError("`documents` must list at least one document")
    if not all(isinstance(document, str) and document for document in config.documents):
        raise ConfigError("`documents` entries must be non-empty strings")

    _ensure_positive(
        {
            "max_file_size": config.max_file_size,
            "max_line_length": config.max_line_length,
        }
    )


def apply_overrides(config: TexConfig, **overrides: object) -> TexConfig:
    """Apply override values to a `TexConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        TexConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `TexConfig`.

    Examples:
        updated = apply_overrides(config, quote_environment="quote")
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> TexConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        TexConfig: Validated configuration ready for conversion.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), default_alignment="c")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
