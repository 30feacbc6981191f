#!filepath: heaptrim/cli.py
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import BinaryIO, Optional

import typer
from rich.console import Console
from rich.table import Table

from heaptrim import __version__, logs
from heaptrim.config import AppConfig, EarlyClockPolicy
from heaptrim.observability.instrumentation import Instrumentation
from heaptrim.trim.catalog import load_catalog
from heaptrim.trim.pipeline import run_trim
from heaptrim.utils.errors import ConfigError, InputError, OutputError, TrimError

app = typer.Typer(help="Cut the beginning out of heaptrack profiles, to reduce file size")
console = Console(stderr=True)


def _open_input(stack: ExitStack, path: str) -> BinaryIO:
    if path == "-":
        return sys.stdin.buffer
    try:
        return stack.enter_context(open(path, "rb"))
    except OSError as e:
        raise InputError(f"cannot open input {path}: {e}") from e


def _open_output(stack: ExitStack, path: Optional[Path]) -> BinaryIO:
    if path is None or str(path) == "-":
        return sys.stdout.buffer
    try:
        return stack.enter_context(open(path, "wb"))
    except OSError as e:
        raise OutputError(f"cannot open output {path}: {e}") from e


def _fail(err: TrimError) -> None:
    console.print(f"[red]{err.kind}[/red]: {err}")
    raise typer.Exit(code=err.exit_code)


@app.command()
def version():
    console.print(f"heaptrim v{__version__}")


@app.command()
def trim(
    profile: str = typer.Argument(
        "-", help="decompressed heaptrack profile, '-' for stdin"
    ),
    skip_seconds: Optional[float] = typer.Option(
        None, "--skip-seconds", "-s", help="skip the first N seconds of the profile. required."
    ),
    preserve_time: Optional[bool] = typer.Option(
        None,
        "--preserve-time/--rewrite-time",
        help="do not rewrite timestamps, leaving the time scale of the graphs intact "
             "(large gaps where data was removed)",
    ),
    buf_size: Optional[int] = typer.Option(
        None, "--buf-size", help="size of the read and write buffers in bytes"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="write here instead of stdout"
    ),
    early_clock: Optional[EarlyClockPolicy] = typer.Option(
        None,
        "--early-clock",
        help="clock updates before the cut: auto, keep (with --preserve-time only), clamp or drop",
    ),
    compact_allocations: Optional[bool] = typer.Option(
        None,
        "--compact-allocations/--no-compact-allocations",
        help="renumber allocation indices so the output starts at index 0",
    ),
    catalog: Optional[str] = typer.Option(
        None, "--catalog", help="tag catalog name or YAML path"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML config file"
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level"),
):
    """
    Stream a decompressed profile and drop what happened before --skip-seconds.

        zstdcat heaptrack.app.zst | heaptrim trim -s 60 | zstd > trimmed.zst
    """
    try:
        cfg = AppConfig.load(str(config) if config is not None else None)
        logs.configure(
            log_dir=cfg.log.dir,
            rotation=cfg.log.rotation,
            retention=cfg.log.retention,
            log_level=log_level or cfg.log.level,
        )

        overrides = {
            "skip_seconds": skip_seconds,
            "preserve_time": preserve_time,
            "buffer_size": buf_size,
            "early_clock": early_clock,
            "compact_allocations": compact_allocations,
            "catalog": catalog,
        }
        trim_cfg = cfg.trim.model_copy(
            update={k: v for k, v in overrides.items() if v is not None}
        )
        if trim_cfg.skip_seconds is None:
            raise ConfigError("--skip-seconds is required")

        with ExitStack() as stack:
            source = _open_input(stack, profile)
            sink = _open_output(stack, output)
            run_trim(source, sink, trim_cfg, inst=Instrumentation())
    except TrimError as e:
        _fail(e)


@app.command("catalog")
def show_catalog(
    name: str = typer.Argument("heaptrack", help="catalog name or YAML path"),
):
    """
    Print the tag -> kind table the trimmer uses.
    """
    try:
        cat = load_catalog(name)
    except TrimError as e:
        _fail(e)
        return

    table = Table(title=f"{cat.name} v{cat.version}")
    table.add_column("tag")
    table.add_column("kind")
    table.add_column("description")
    for tag, spec in cat.tags.items():
        table.add_row(tag, spec.kind.value, spec.description)
    console.print(table)
    console.print("[dim]tags not listed are opaque and always kept[/dim]")


if __name__ == "__main__":
    app()

# zstdcat profile.zst | python -m heaptrim.cli trim --skip-seconds 60 > out
