"""jsbundle CLI - bundle selected modules into one file."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv

# Load .env file before any other imports that might use env vars
load_dotenv()

import click  # noqa: E402

from jsbundle import __version__  # noqa: E402

VerbosityLevel = Literal["quiet", "normal", "verbose"]


@click.command("jsbundle")
@click.argument("files", nargs=-1, type=click.Path(path_type=Path))
@click.option("--complete", is_flag=True, help="Include every module in the source directory")
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project root (default: from config, else current directory)",
)
@click.option("--src-dir", default=None, help="Source directory, relative to the root")
@click.option(
    "--template",
    "template_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Template file containing the injection marker",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to configuration file",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-error output")
@click.option("--debug", is_flag=True, help="Show full tracebacks on errors")
@click.version_option(version=__version__, prog_name="jsbundle")
def cli(
    files: tuple[Path, ...],
    complete: bool,
    root: Path | None,
    src_dir: str | None,
    template_path: Path | None,
    config_path: Path | None,
    verbose: bool,
    quiet: bool,
    debug: bool,
) -> None:
    """Bundle FILES and everything they require into a single script.

    Only the basename of each FILE is used: `src/map.js` and `map.js` both
    request the module `map`. The bundle is written to stdout.

    \b
    Examples:
        jsbundle src/map.js src/filter.js > dist/custom.js
        jsbundle --complete > dist/full.js
    """
    from jsbundle.bundler import Bundler
    from jsbundle.config import BundleConfig
    from jsbundle.errors import BundleError
    from jsbundle.logging import print_error, print_warning, setup_logging

    verbosity: VerbosityLevel = "quiet" if quiet else "verbose" if verbose else "normal"
    setup_logging(verbosity)

    try:
        config = BundleConfig.load(config_path)
        if root is not None:
            config.layout.root = str(root)
        if src_dir is not None:
            config.layout.src_dir = src_dir
        if template_path is not None:
            config.template.path = str(template_path.resolve())

        bundler = Bundler(config)
        if complete:
            if files:
                print_warning(f"--complete given, ignoring {len(files)} file argument(s)")
            files = tuple(bundler.layout.discover())

        bundle = bundler.build(files)
    except BundleError as e:
        if debug:
            raise
        print_error(e.message)
        sys.exit(e.exit_code)

    click.echo(bundle, nl=False)


def main() -> None:
    """Entry point for the jsbundle CLI."""
    cli()


if __name__ == "__main__":
    main()
