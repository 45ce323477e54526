from __future__ import annotations

import textwrap
import pytest
from pathlib import Path

from md_to_tex.config import (
    ConfigError,
    TexConfig,
    apply_overrides,
    build_config,
    load_config,
    normalize_config,
    validate_config,
)


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def _write_md_to_tex(base: Path, body: str) -> Path:
    path = base / ".md-to-tex.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_loads_config_from_pyproject(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-to-tex]
        heading_commands = ["section", "subsection", "subsubsection", "paragraph"]
        quote_environment = "quote"
        code_environment = "minted"
        default_alignment = " c "
        source_dir = "src"
        documents = ["body"]
        main_document = "thesis.tex"
        latex_engine = "lualatex"
        bibtex_command = "biber"
        max_file_size = 1
        max_line_length = 2
        """,
    )

    config = load_config(tmp_path)

    assert config == TexConfig(
        heading_commands=("section", "subsection", "subsubsection", "paragraph"),
        quote_environment="quote",
        code_environment="minted",
        default_alignment="c",
        source_dir="src",
        documents=("body",),
        main_document="thesis.tex",
        latex_engine="lualatex",
        bibtex_command="biber",
        max_file_size=1,
        max_line_length=2,
    )


def test_loads_config_from_dotfile(tmp_path: Path):
    _write_md_to_tex(
        tmp_path,
        """
        [md-to-tex]
        quote_environment = "quotation"
        """,
    )
    nested = tmp_path / "child"
    nested.mkdir()

    config = load_config(nested)

    assert config.quote_environment == "quotation"


def test_dotfile_accepts_tool_table(tmp_path: Path):
    _write_md_to_tex(
        tmp_path,
        """
        [tool.md-to-tex]
        latex_engine = "pdflatex"
        """,
    )

    assert load_config(tmp_path).latex_engine == "pdflatex"


def test_pyproject_takes_precedence_over_dotfile(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-to-tex]
        latex_engine = "lualatex"
        """,
    )
    _write_md_to_tex(
        tmp_path,
        """
        [md-to-tex]
        latex_engine = "pdflatex"
        """,
    )

    assert load_config(tmp_path).latex_engine == "lualatex"


def test_load_config_walks_up_directories(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-to-tex]
        main_document = "root.tex"
        """,
    )
    nested = tmp_path / "a" / "b" / "c"
    nested.mkdir(parents=True)

    assert load_config(nested).main_document == "root.tex"


def test_empty_config_table_stops_inheritance(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-to-tex]
        main_document = "root.tex"
        """,
    )
    child = tmp_path / "child"
    child.mkdir()
    _write_pyproject(
        child,
        """
        [tool.md-to-tex]
        """,
    )

    assert load_config(child) == TexConfig()


def test_pyproject_without_table_is_skipped(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-to-tex]
        bibtex_command = "biber"
        """,
    )
    child = tmp_path / "child"
    child.mkdir()
    _write_pyproject(
        child,
        """
        [project]
        name = "paper"
        """,
    )

    assert load_config(child).bibtex_command == "biber"


def test_load_config_returns_defaults_when_missing(tmp_path: Path):
    assert load_config(tmp_path) == TexConfig()


def test_load_config_skips_invalid_toml(tmp_path: Path):
    invalid_dir = tmp_path / "invalid"
    invalid_dir.mkdir()
    _write_pyproject(invalid_dir, "not = {valid")
    _write_pyproject(
        tmp_path,
        """
        [tool.md-to-tex]
        quote_environment = "quote"
        """,
    )

    nested = invalid_dir / "child"
    nested.mkdir()

    assert load_config(nested).quote_environment == "quote"


def test_load_config_errors_on_unknown_keys(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-to-tex]
        quote_environment = "quote"
        unexpected = true
        """,
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_errors_on_non_table(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool]
        md-to-tex = "quote"
        """,
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_partial_config_merges_with_defaults(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-to-tex]
        default_alignment = "r"
        """,
    )

    config = load_config(tmp_path)

    assert config.default_alignment == "r"
    # Defaults preserved
    defaults = TexConfig()
    assert config.heading_commands == defaults.heading_commands
    assert config.documents == defaults.documents


def test_normalize_config_converts_lists():
    config = normalize_config(
        TexConfig(
            heading_commands=["a", "b", "c", "d"],  # type: ignore[arg-type]
            documents=["x"],  # type: ignore[arg-type]
        )
    )

    assert config.heading_commands == ("a", "b", "c", "d")
    assert config.documents == ("x",)


def test_validate_config_accepts_defaults():
    validate_config(TexConfig())


def test_validate_config_accepts_starred_commands():
    validate_config(TexConfig(heading_commands=("chapter*", "section*", "subsection", "paragraph")))


@pytest.mark.parametrize(
    "config",
    [
        TexConfig(heading_commands=("chapter", "section", "subsection")),
        TexConfig(heading_commands=("chapter", "section", "sub section", "paragraph")),
        TexConfig(heading_commands=("\\chapter", "section", "subsection", "paragraph")),
        TexConfig(quote_environment=""),
        TexConfig(quote_environment="display quote"),
        TexConfig(code_environment="lst{listing}"),
        TexConfig(default_alignment=""),
        TexConfig(default_alignment="   "),
        TexConfig(main_document=""),
        TexConfig(latex_engine=""),
        TexConfig(bibtex_command=""),
        TexConfig(documents=()),
        TexConfig(documents=("content", "")),
        TexConfig(max_file_size=0),
        TexConfig(max_line_length=-1),
    ],
)
def test_validate_config_rejects_invalid_values(config: TexConfig):
    with pytest.raises(ConfigError):
        validate_config(config)


@pytest.mark.parametrize(
    "config",
    [
        TexConfig(max_file_size="big"),  # type: ignore[arg-type]
        TexConfig(max_line_length="long"),  # type: ignore[arg-type]
        TexConfig(max_line_length=True),  # type: ignore[arg-type]
    ],
)
def test_validate_config_rejects_non_numeric_limits(config: TexConfig):
    with pytest.raises(ConfigError):
        validate_config(config)


def test_apply_overrides_ignores_none():
    config = TexConfig()

    assert apply_overrides(config, quote_environment=None) is config


def test_apply_overrides_replaces_values():
    config = apply_overrides(TexConfig(), quote_environment="quote", latex_engine="lualatex")

    assert config.quote_environment == "quote"
    assert config.latex_engine == "lualatex"


def test_build_config_applies_overrides_after_file(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-to-tex]
        quote_environment = "quote"
        code_environment = "minted"
        """,
    )

    config = build_config(tmp_path, quote_environment="quotation")

    assert config.quote_environment == "quotation"
    assert config.code_environment == "minted"


def test_build_config_validates_overrides(tmp_path: Path):
    with pytest.raises(ConfigError):
        build_config(tmp_path, code_environment="bad env")
