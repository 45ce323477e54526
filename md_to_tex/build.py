"""Conversion of a paper's fixed document set and the typesetting passes after it."""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Callable
from pathlib import Path

from .config import TexConfig
from .constants import MAX_TYPESET_PASSES, TEX_SUFFIX
from .converter import ConvertFileError, convert_file, render_tex
from .filesystem import (
    collect_file_stat,
    enforce_file_size,
    get_max_file_size,
    get_max_line_length,
    normalize_filepath,
    write_output,
)


class BuildError(Exception):
    """Raised when one or more documents fail to convert.

    Args:
        failures: Mapping of document path to the error message it produced.
    """

    def __init__(self, failures: dict[Path, str]):
        self.failures = failures
        details = "\n".join(f"  {path}: {message}" for path, message in failures.items())
        super().__init__(f"Failed to convert {len(failures)} document(s):\n{details}")


class TypesetError(Exception):
    """Raised when a typesetting command cannot be run or exits with an error."""


def convert_documents(
    source_dir: Path,
    output_dir: Path,
    config: TexConfig | None = None,
    warn: Callable[[str], None] | None = None,
) -> list[Path]:
    """Convert every configured document from `source_dir` into `output_dir`.

    Each ``<stem>.md`` listed in `config.documents` becomes ``<stem>.tex``. A
    document that fails does not stop the others from being converted.

    Args:
        source_dir: Directory holding the markdown documents.
        output_dir: Directory receiving the LaTeX fragments.
        config: Conversion configuration.
        warn: Optional callback for non-fatal diagnostics.

    Returns:
        list[Path]: Paths of the written LaTeX files, in configuration order.

    Raises:
        BuildError: If any document could not be converted or written.
        ValueError: If an environment limit is not a positive integer.

    Examples:
        convert_documents(Path(".."), Path("."), TexConfig())
    """
    config = config or TexConfig()
    max_file_size = get_max_file_size(default=config.max_file_size)
    max_line_length = get_max_line_length(default=config.max_line_length)

    written: list[Path] = []
    failures: dict[Path, str] = {}
    for stem in config.documents:
        source = source_dir / f"{stem}.md"
        target = output_dir / f"{stem}{TEX_SUFFIX}"
        try:
            source = normalize_filepath(str(source), source_dir)
            enforce_file_size(collect_file_stat(source), max_file_size, source)
            result = convert_file(source, max_line_length, config, warn=warn)
            write_output(target, render_tex(result.lines), warn=warn)
        except (ValueError, IOError, ConvertFileError) as error:
            failures[source] = str(error)
            continue
        written.append(target)

    if failures:
        raise BuildError(failures)
    return written


def typesetting_commands(passes: int, config: TexConfig | None = None) -> list[list[str]]:
    """List the commands run for a number of typesetting passes.

    One pass runs the LaTeX engine once, two passes run it twice so that
    references resolve, and three passes add a bibliography run after the
    first engine run.

    Args:
        passes: Number of requested passes, from 0 to `MAX_TYPESET_PASSES`.
        config: Supplies the engine, bibliography command, and main document.

    Returns:
        list[list[str]]: Argument vectors in execution order.

    Raises:
        ValueError: If `passes` is outside the supported range.

    Examples:
        typesetting_commands(3)  # xelatex, bibtex, xelatex, xelatex
    """
    if not 0 <= passes <= MAX_TYPESET_PASSES:
        raise ValueError(f"passes must be between 0 and {MAX_TYPESET_PASSES}, got {passes}")

    config = config or TexConfig()
    engine = [*shlex.split(config.latex_engine), config.main_document]
    if passes == 3:
        bibtex = [*shlex.split(config.bibtex_command), Path(config.main_document).stem]
        return [engine, bibtex, engine, engine]
    return [engine] * passes


def run_typesetting(
    passes: int,
    config: TexConfig | None = None,
    cwd: Path | None = None,
    runner: Callable[..., object] = subprocess.run,
) -> None:
    """Run the typesetting commands, stopping at the first failure.

    Args:
        passes: Number of requested passes.
        config: Supplies the commands and the main document.
        cwd: Directory the commands run in.
        runner: Callable with the signature of `subprocess.run`.

    Raises:
        TypesetError: If a command is missing or exits with a non-zero status.
    """
    for command in typesetting_commands(passes, config):
        try:
            runner(command, cwd=cwd, check=True)
        except FileNotFoundError as error:
            raise TypesetError(f"Command not found: {command[0]}") from error
        except subprocess.CalledProcessError as error:
            raise TypesetError(
                f"`{' '.join(command)}` exited with status {error.returncode}"
            ) from error
