"""
Converts markdown documents to LaTeX.
`convert` handles a single file; `build` converts a paper's documents and runs
the typesetting passes.
"""

from __future__ import annotations

from pathlib import Path

import click
from .build import BuildError, TypesetError, convert_documents, run_typesetting
from .config import ConfigError, build_config
from .constants import MAX_TYPESET_PASSES
from .converter import ConvertFileError, convert_file, render_tex
from .filesystem import (
    collect_file_stat,
    enforce_file_size,
    get_max_file_size,
    get_max_line_length,
    normalize_filepath,
    write_output,
)

__all__ = ["cli"]


def _warn(message: str) -> None:
    click.echo(message, err=True)


@click.group()
@click.version_option(package_name="md-to-tex")
def cli():
    """Convert lightweight markdown into LaTeX fragments."""


@cli.command()
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, writable=True),
    help="Write the LaTeX here instead of standard output",
)
@click.option("--quote-environment", help="Environment used for block quotes")
@click.option("--code-environment", help="Environment used for fenced code")
@click.option("--default-alignment", help="Column specifier for unannotated table columns")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def convert(
    filepath: str,
    output: str | None = None,
    quote_environment: str | None = None,
    code_environment: str | None = None,
    default_alignment: str | None = None,
):
    """
    Convert one markdown file to LaTeX.

    Args:
        filepath: Path to the markdown file to convert.
        output: Destination file; standard output when omitted.
        quote_environment: Override for the block quote environment.
        code_environment: Override for the code block environment.
        default_alignment: Override for the default table column specifier.

    Raises:
        click.BadParameter: If the path is invalid or an override is rejected
            by configuration validation.
        click.ClickException: If reading, converting, or writing fails.

    Examples:
        md-to-tex convert content.md -o content.tex
    """
    base_dir = Path.cwd().resolve()
    try:
        source = normalize_filepath(filepath, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error
    try:
        config = build_config(
            source.parent,
            quote_environment=quote_environment,
            code_environment=code_environment,
            default_alignment=default_alignment,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
        max_line_length = get_max_line_length(default=config.max_line_length)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        enforce_file_size(collect_file_stat(source), max_file_size, source)
    except IOError as error:
        raise click.ClickException(str(error)) from error

    try:
        result = convert_file(source, max_line_length, config, warn=_warn)
    except ConvertFileError as error:
        raise click.ClickException(str(error)) from error

    tex = render_tex(result.lines)
    if output is None:
        click.echo(tex, nl=False)
        return

    try:
        write_output(Path(output), tex, warn=_warn)
    except IOError as error:
        raise click.ClickException(str(error)) from error


@cli.command()
@click.option(
    "-s",
    "--source-dir",
    type=click.Path(file_okay=False),
    help="Directory holding the markdown documents (default from config: ..)",
)
@click.option(
    "-d",
    "--output-dir",
    type=click.Path(file_okay=False, exists=True),
    default=".",
    show_default=True,
    help="Directory receiving the LaTeX files",
)
@click.option("--latex-engine", help="Command running the LaTeX engine")
@click.option(
    "-x",
    "passes",
    count=True,
    help=(
        "Run the LaTeX engine after converting. Twice resolves references; "
        "three times adds a bibtex run after the first pass."
    ),
)
def build(
    source_dir: str | None = None,
    output_dir: str = ".",
    latex_engine: str | None = None,
    passes: int = 0,
):
    """
    Convert the paper's documents and optionally typeset it.

    Args:
        source_dir: Override for the directory holding the documents.
        output_dir: Directory receiving the LaTeX files.
        latex_engine: Override for the LaTeX engine command.
        passes: Number of times `-x` was given.

    Raises:
        click.UsageError: If `-x` is given more than three times.
        click.BadParameter: If configuration validation fails.
        click.ClickException: If conversion or typesetting fails.

    Examples:
        md-to-tex build -xx
    """
    if passes > MAX_TYPESET_PASSES:
        raise click.UsageError("The '-x' argument was supplied too many times")

    output_path = Path(output_dir).resolve()
    try:
        config = build_config(
            output_path, source_dir=source_dir, latex_engine=latex_engine
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    source_path = (output_path / config.source_dir).resolve()
    try:
        written = convert_documents(source_path, output_path, config, warn=_warn)
    except (BuildError, ValueError) as error:
        raise click.ClickException(str(error)) from error

    for path in written:
        click.echo(f"Wrote {path}", err=True)

    if passes == 0:
        click.echo(
            f"Tex files built. Typeset with `md-to-tex build -xxx` or run "
            f"{config.latex_engine} on {config.main_document}.",
            err=True,
        )
        return

    try:
        run_typesetting(passes, config, cwd=output_path)
    except TypesetError as error:
        raise click.ClickException(str(error)) from error


if __name__ == "__main__":
    cli()
