"""Cyclopts CLI entrypoint for assembling a style guide.

The ``stylebook`` console script defined here renders every view under the
configured views patterns into the output directory, or lists the materials
tree so fragment ids can be checked before referencing them from templates.

Examples
--------
Build with the configuration in the current directory:

>>> from stylebook.cli import main
>>> main()  # doctest: +SKIP

Build into a custom directory and keep going on errors:

>>> from stylebook.cli import app
>>> app(["build", "--dest", "public", "--log-errors"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .assembler import Assembler, assemble
from .config import AssemblyConfig, build_assembly_config, load_assembly_config
from .models import Collection

DEFAULT_CONFIG = Path("stylebook.yaml")

app = App(name="stylebook", config=cyclopts.config.Env("STYLEBOOK_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config(
    config: Path, overrides: dict[str, typ.Any] | None = None
) -> AssemblyConfig:
    """Load ``config`` when it exists, otherwise build from defaults."""
    if config.exists():
        return load_assembly_config(config, overrides)
    return build_assembly_config(overrides)


@app.command(help="Render every view into the output directory.")
def build(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to the assembly config (YAML)")
    ] = DEFAULT_CONFIG,
    dest: typ.Annotated[
        Path | None, Parameter(help="Override the output folder")
    ] = None,
    log_errors: typ.Annotated[
        bool, Parameter(help="Log errors and exit cleanly instead of failing")
    ] = False,
    verbose: typ.Annotated[bool, Parameter(help="Enable debug logging")] = False,
) -> None:
    """Assemble the style guide described by ``config``.

    Parameters
    ----------
    config : Path, optional
        YAML configuration file; defaults apply when it does not exist.
    dest : Path or None, optional
        Output directory override.
    log_errors : bool, optional
        Log failures and return instead of exiting with status ``1``.
    verbose : bool, optional
        Log discovery and write progress at debug level.

    Returns
    -------
    None
        Writes rendered views and prints each written path.
    """
    _configure_logging(verbose=verbose)
    overrides: dict[str, typ.Any] = {}
    if dest is not None:
        overrides["dest"] = dest
    if log_errors:
        overrides["log_errors"] = True
    written = assemble(_load_config(config, overrides))
    for path in written:
        print(f"wrote {_format_path(path)}")


@app.command(name="list", help="Print the materials collection tree.")
def list_materials(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to the assembly config (YAML)")
    ] = DEFAULT_CONFIG,
) -> None:
    """Print collections, sub-collections, and material ids."""
    assembler = Assembler(_load_config(config))
    assembler.setup()
    for key, collection in assembler.state.materials.items():
        print(f"{collection.name} ({key})")
        for item_key, item in collection.items.items():
            if isinstance(item, Collection):
                print(f"  {item.name} ({item_key})")
                for child in item.items.values():
                    print(f"    {child.id}")
            else:
                print(f"  {item.id}")


def main() -> None:
    """Invoke the Cyclopts application behind the ``stylebook`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
