"""linepilot CLI — entry point.

Commands:
    linepilot encode  <file> --logger <name>   NDJSON in, line protocol out
    linepilot plugins                          List registered plugins
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import settings
from .errors import ConfigurationError, RecordError
from .plugins.registry import default_registry

console = Console()
err_console = Console(stderr=True)

_PRECISIONS = ["ns", "us", "ms", "s", "m", "h"]


# ── CLI root ─────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version="1.0.0", prog_name="linepilot")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """linepilot — JSON telemetry to InfluxDB line protocol."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


# ── encode ───────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.Path(exists=True, path_type=Path))
@click.option("--logger", "-l", "logger_name", required=True, help="Logger name, e.g. app.module.Type.")
@click.option(
    "--decoder", "-d", default="json",
    type=click.Choice(["json", "ulogd"], case_sensitive=False),
    help="Configured JSON decoder or heuristic ulogd decoder.",
    show_default=True,
)
@click.option(
    "--precision", "-p", default=settings.encoder.timestamp_precision,
    type=click.Choice(_PRECISIONS), help="Output timestamp precision.", show_default=True,
)
@click.option("--time-key", default=settings.json_decoder.time_key, help="[json] Key holding the time.")
@click.option("--time-layout", default=settings.json_decoder.time_layout, help="[json] strptime layout of the time.")
@click.option("--time-location", default=None, help="IANA zone for times without an offset (default: Local).")
@click.option("--ignore", "-i", multiple=True, help="[json] Key to drop; repeatable.")
@click.option("--sort-keys", is_flag=True, default=settings.json_decoder.sort_keys, help="[json] Emit fields in key order.")
@click.option(
    "--first-segment", is_flag=True, default=settings.ulogd_decoder.use_first_segment,
    help="[ulogd] Take the record type from the first logger segment.",
)
@click.option(
    "--timestamp-policy", default=settings.ulogd_decoder.timestamp_policy,
    type=click.Choice(["field", "primary"]), help="[ulogd] Where a parsed timestamp goes.", show_default=True,
)
@click.option("--strict", is_flag=True, help="Stop at the first bad record (exit code 1).")
def encode(
    file: Path,
    logger_name: str,
    decoder: str,
    precision: str,
    time_key: str,
    time_layout: str,
    time_location: str | None,
    ignore: tuple[str, ...],
    sort_keys: bool,
    first_segment: bool,
    timestamp_policy: str,
    strict: bool,
) -> None:
    """Decode an NDJSON file and write InfluxDB line protocol to stdout.

    Bad records are reported on stderr with their line number and skipped.

    \b
    Examples:
      linepilot encode app.json -l svc.api.Ping --time-key time --time-layout %Y-%m-%dT%H:%M:%S
      linepilot encode ulogd.json -l ulogd.json --decoder ulogd --first-segment -p s
    """
    try:
        if decoder == "json":
            dec = default_registry.create_decoder(
                "JSONDecoder",
                time_key=time_key,
                time_layout=time_layout,
                time_location=time_location or settings.json_decoder.time_location,
                keys_ignore=ignore or settings.json_decoder.keys_ignore,
                sort_keys=sort_keys,
            )
        else:
            dec = default_registry.create_decoder(
                "UlogdDecoder",
                time_location=time_location or settings.ulogd_decoder.time_location,
                use_first_segment=first_segment,
                timestamp_policy=timestamp_policy,
            )
        enc = default_registry.create_encoder("InfluxdbEncoder", timestamp_precision=precision)
    except ConfigurationError as exc:
        err_console.print(f"[red]Configuration error:[/red] {escape(str(exc))}", soft_wrap=True)
        sys.exit(2)

    out = click.get_binary_stream("stdout")
    encoded = failed = 0
    with file.open(encoding="utf-8", errors="replace") as fh:
        for lineno, raw_line in enumerate(fh, start=1):
            line = raw_line.strip()
            if not line:
                continue
            try:
                data = enc.encode(dec.decode(logger_name, line))
            except RecordError as exc:
                failed += 1
                err_console.print(
                    f"[yellow]line {lineno}:[/yellow] {type(exc).__name__}: {escape(str(exc))}",
                    soft_wrap=True,
                )
                if strict:
                    sys.exit(1)
                continue
            out.write(data)
            encoded += 1
    out.flush()

    err_console.print(f"[dim]Encoded {encoded} records from {file.name}, {failed} failed[/dim]")


# ── plugins ──────────────────────────────────────────────────────────────────


@main.command()
@click.option("--discover", is_flag=True, help="Also load 'linepilot.plugins' entry points.")
def plugins(discover: bool) -> None:
    """List registered decoder and encoder plugins."""
    if discover:
        loaded = default_registry.discover()
        err_console.print(f"[dim]Loaded {loaded} entry-point plugins[/dim]")

    tbl = Table(title="linepilot plugins", box=box.ROUNDED)
    tbl.add_column("Kind")
    tbl.add_column("Name")
    for name in default_registry.list_decoders():
        tbl.add_row("decoder", name)
    for name in default_registry.list_encoders():
        tbl.add_row("encoder", name)
    console.print(tbl)


if __name__ == "__main__":
    main()
