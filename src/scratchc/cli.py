"""Scratch compiler CLI."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from scratchc import __version__
from scratchc.ast_nodes import Block
from scratchc.config import CONFIG_NAME, find_config, load_config
from scratchc.errors import CompileError, DiagnosticRenderer
from scratchc.formatter import ScratchFormatter
from scratchc.grammar import parse
from scratchc.project import scaffold

SOURCE_SUFFIX = ".scr"


def _report(error: CompileError, sources: dict[str, str] | None = None) -> None:
    renderer = DiagnosticRenderer(color=True, sources=sources)
    for diag in error.diagnostics:
        click.echo(renderer.render(diag), err=True)


def _parse_file(path: Path) -> Block | None:
    """Parse one file, reporting diagnostics. Returns None on failure."""
    try:
        return parse(path.read_text(), str(path))
    except CompileError as e:
        _report(e)
        return None


def _source_files(target: Path) -> list[Path]:
    if target.is_dir():
        return sorted(target.rglob(f"*{SOURCE_SUFFIX}"))
    return [target]


@click.group()
@click.version_option(__version__, prog_name="scratchc")
def main() -> None:
    """The Scratch language front end."""


@main.command()
@click.argument("path", default=".", type=click.Path(exists=True))
def check(path: str) -> None:
    """Parse every source file of a Scratch project."""
    try:
        config_path = find_config(Path(path))
    except FileNotFoundError:
        click.echo(f"error: no {CONFIG_NAME} found", err=True)
        raise SystemExit(1)

    config = load_config(config_path)
    click.echo(f"checking {config.package.name}...")
    src_dir = config_path.parent / config.build.src_dir
    if not src_dir.is_dir():
        src_dir = config_path.parent  # fallback to project root

    files = _source_files(src_dir)
    if not files:
        click.echo(f"warning: no {SOURCE_SUFFIX} files found", err=True)
        return

    failed = [f for f in files if _parse_file(f) is None]
    if failed:
        click.echo(f"checked {config.package.name}: {len(failed)} file(s) with errors", err=True)
        raise SystemExit(1)
    click.echo(f"checked {config.package.name}: {len(files)} file(s), no errors")


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def view(file: str) -> None:
    """View the AST of a Scratch source file."""
    program = _parse_file(Path(file))
    if program is None:
        raise SystemExit(1)
    _dump_ast(program, 0)


@main.command(name="format")
@click.argument("path", default=".", type=click.Path(exists=True))
@click.option("--check", is_flag=True, help="Check formatting without modifying files.")
@click.option("--stdin", "use_stdin", is_flag=True, help="Read from stdin, write to stdout.")
def format_cmd(path: str, check: bool, use_stdin: bool) -> None:
    """Format Scratch source files."""
    formatter = ScratchFormatter()

    if use_stdin:
        source = sys.stdin.read()
        try:
            program = parse(source, "<stdin>")
        except CompileError as e:
            _report(e, sources={"<stdin>": source})
            raise SystemExit(1)
        formatted = formatter.format(program)
        if check:
            if formatted != source:
                raise SystemExit(1)
        else:
            sys.stdout.write(formatted)
        return

    files = _source_files(Path(path))
    if not files:
        click.echo(f"no {SOURCE_SUFFIX} files found", err=True)
        return

    needs_formatting = False
    had_errors = False
    for source_file in files:
        source = source_file.read_text()
        try:
            program = parse(source, str(source_file))
        except CompileError as e:
            _report(e)
            had_errors = True
            continue

        formatted = formatter.format(program)
        if formatted != source:
            if check:
                click.echo(f"would reformat {source_file}")
                needs_formatting = True
            else:
                source_file.write_text(formatted)
                click.echo(f"formatted {source_file}")

    if had_errors or (check and needs_formatting):
        raise SystemExit(1)


@main.command()
@click.argument("name")
def new(name: str) -> None:
    """Create a new Scratch project."""
    try:
        project_dir = scaffold(name)
    except FileExistsError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)
    click.echo(f"created project '{name}' at {project_dir}")


def _dump_ast(node: object, depth: int) -> None:
    """Print a readable AST dump."""
    indent = "  " * depth
    name = type(node).__name__

    if hasattr(node, "__dataclass_fields__"):
        click.echo(f"{indent}{name}")
        for field_name in node.__dataclass_fields__:  # type: ignore[union-attr]
            value = getattr(node, field_name)
            if isinstance(value, tuple):
                if value:
                    click.echo(f"{indent}  {field_name}:")
                    for item in value:
                        _dump_ast(item, depth + 2)
                else:
                    click.echo(f"{indent}  {field_name}: []")
            elif hasattr(value, "__dataclass_fields__"):
                click.echo(f"{indent}  {field_name}:")
                _dump_ast(value, depth + 2)
            else:
                click.echo(f"{indent}  {field_name}: {value!r}")
    else:
        click.echo(f"{indent}{name}: {node!r}")
