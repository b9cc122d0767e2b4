from __future__ import annotations
import logging
import shutil
from typing import Optional
import typer
from .actions.core import RenderDocs
from .cache import CacheStore
from .config import DocsConfig
from .errors import Docs2PdfError
from .graph import build_chain, render_ascii
from .models import OverwritePolicy
from .pipeline import Pipeline

app = typer.Typer(add_completion=False, help="Build one PDF out of the latest published docs")

TITLE = "Docs To PDF"
CONFIG_HELP = "TOML config file (defaults to ./docs2pdf.toml when present)"


def display_big_title(title: str) -> None:
    width = shutil.get_terminal_size((80, 20)).columns
    line = typer.style("=" * width, fg=typer.colors.MAGENTA)
    typer.echo(line)
    typer.echo(typer.style(title.center(width).rstrip(), fg=typer.colors.GREEN, bold=True))
    typer.echo(line)


def display_global_info(label: str, value: object) -> None:
    typer.echo(f"{typer.style(label + ':', bold=True)} {typer.style(str(value), fg=typer.colors.BRIGHT_BLUE, bold=True)}")


def _cfg(config: Optional[str]) -> DocsConfig:
    cfg = DocsConfig.load(config)
    cfg.validate()
    return cfg


def _pipeline(cfg: DocsConfig, policy: OverwritePolicy) -> Pipeline:
    return Pipeline.from_config(cfg, policy=policy)


def _fail(exc: Exception) -> typer.Exit:
    typer.secho(str(exc), fg=typer.colors.RED, err=True)
    return typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context, verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        build(config=None, policy=OverwritePolicy.PROMPT)


@app.command()
def build(
    config: Optional[str] = typer.Option(None, help=CONFIG_HELP),
    policy: OverwritePolicy = typer.Option(OverwritePolicy.PROMPT, help="What to do with artifacts that already exist"),
):
    """Resolve, fetch, merge and render."""
    cfg = _cfg(config)
    display_big_title(TITLE)
    pipe = _pipeline(cfg, policy)
    try:
        resolved = pipe.resolve()
        version, ident, paths = resolved
        typer.echo("")
        display_global_info("Latest Docs Version", version.tag)
        display_global_info("Last Docs Push Date", version.last_update.isoformat())
        display_global_info("Generated Unique ID", ident)
        display_global_info("Docs folder", paths.docs_dir)
        typer.echo("")
        result = pipe.run(resolved)
    except Docs2PdfError as exc:
        raise _fail(exc)
    for key in result.fallbacks:
        typer.secho(f"Warning: could not refresh {key}; using the cached value", fg=typer.colors.YELLOW, err=True)
    for outcome in result.outcomes:
        display_global_info(outcome.stage.capitalize(), "done" if outcome.ran else "skipped (kept existing)")
    display_global_info("PDF", result.paths.rendered)


@app.command()
def info(config: Optional[str] = typer.Option(None, help=CONFIG_HELP)):
    """Show the resolved version and where its artifacts live."""
    cfg = _cfg(config)
    try:
        version, ident, paths = _pipeline(cfg, OverwritePolicy.SKIP).resolve()
    except Docs2PdfError as exc:
        raise _fail(exc)
    display_global_info("Latest Docs Version", version.tag)
    display_global_info("Last Docs Push Date", version.last_update.isoformat())
    display_global_info("Generated Unique ID", ident)
    display_global_info("Docs folder", paths.docs_dir)
    display_global_info("Merged markdown", paths.merged)
    display_global_info("PDF", paths.rendered)


@app.command()
def plan(config: Optional[str] = typer.Option(None, help=CONFIG_HELP)):
    """Print the stage tree and which artifacts are already on disk."""
    cfg = _cfg(config)
    pipe = _pipeline(cfg, OverwritePolicy.SKIP)
    try:
        version, ident, paths = pipe.resolve()
    except Docs2PdfError as exc:
        raise _fail(exc)
    chain = build_chain(RenderDocs(), pipe.context(version, ident, paths))
    typer.echo(render_ascii(chain))


@app.command("clear-cache")
def clear_cache(config: Optional[str] = typer.Option(None, help=CONFIG_HELP)):
    """Forget the cached version metadata."""
    cfg = _cfg(config)
    if CacheStore(cfg.cache_file).clear():
        typer.echo(f"Removed {cfg.cache_file}")
    else:
        typer.echo(f"No cache at {cfg.cache_file}")


if __name__ == "__main__":
    app()
