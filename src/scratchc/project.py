"""Project scaffolding for `scratchc new`."""

from __future__ import annotations

from pathlib import Path

from scratchc.config import CONFIG_NAME

_SCRATCH_TOML_TEMPLATE = """\
[package]
name = "{name}"
version = "0.1.0"
authors = []
license = ""

[build]
src_dir = "src"
"""

_MAIN_SCR_TEMPLATE = """\
// Hello from Scratch!
function main() {
    putchar(46);
    return 0;
}
"""

_GITIGNORE = """\
build/
__pycache__/
"""

_README_TEMPLATE = """\
# {name}

A Scratch project.

## Check

```bash
scratchc check
```
"""


def scaffold(name: str, parent: Path | None = None) -> Path:
    """Create a new Scratch project directory. Returns the project path."""
    base = parent or Path.cwd()
    project_dir = base / name

    if project_dir.exists():
        raise FileExistsError(f"Directory '{name}' already exists")

    src_dir = project_dir / "src"
    src_dir.mkdir(parents=True)

    (project_dir / CONFIG_NAME).write_text(_SCRATCH_TOML_TEMPLATE.format(name=name))
    (src_dir / "main.scr").write_text(_MAIN_SCR_TEMPLATE)
    (project_dir / ".gitignore").write_text(_GITIGNORE)
    (project_dir / "README.md").write_text(_README_TEMPLATE.format(name=name))

    return project_dir
