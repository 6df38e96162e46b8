import logging
from pathlib import Path

import orjson
import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler

from dhcpleases.config import ConfigError, ParserConfig, load_config, sample_config
from dhcpleases.data.generator import generate_leases_file
from dhcpleases.export import leases_to_json, write_csv, write_jsonl
from dhcpleases.model import Lease
from dhcpleases.parser import parse_with_config
from dhcpleases.render import render_leases
from dhcpleases.summarize import summarize_leases

app = typer.Typer(help="Parse and re-emit ISC dhcpd.leases files.")
console = Console()
err_console = Console(stderr=True)
SUPPORTED_FORMATS = {"json", "jsonl", "csv"}

logger = logging.getLogger("dhcpleases")


def _setup_logging(verbose: bool) -> None:
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def _load_config(path: Path | None) -> ParserConfig:
    if path is None:
        return ParserConfig()
    if not path.is_file():
        raise typer.BadParameter(f"Config file not found: {path}")
    try:
        return load_config(path)
    except ConfigError as exc:
        raise typer.BadParameter(f"Invalid config {path}: {exc}") from exc


def _read_leases(path: Path, config: ParserConfig) -> list[Lease]:
    if not path.is_file():
        raise typer.BadParameter(f"Input file not found: {path}")
    with path.open("rb") as stream:
        return parse_with_config(stream, config)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    _setup_logging(verbose)


@app.command()
def parse(
    input: Path = typer.Argument(..., help="dhcpd.leases file to parse."),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Optional path to write structured output."
    ),
    format: str = typer.Option("json", "--format", "-f", help="Output format: json | jsonl | csv."),
    active_only: bool = typer.Option(
        False, "--active-only", help="Keep only active, unexpired leases."
    ),
    config: Path | None = typer.Option(None, "--config", "-c", help="Parser config (yaml/json)."),
) -> None:
    """Parse a leases file into structured records."""
    fmt = format.lower()
    if fmt not in SUPPORTED_FORMATS:
        raise typer.BadParameter(f"Unsupported format '{format}'. Choose from {SUPPORTED_FORMATS}.")

    leases = _read_leases(input, _load_config(config))
    if active_only:
        leases = [lease for lease in leases if lease.is_active()]
    logger.debug("%d leases selected from %s", len(leases), input)

    if output is None:
        if fmt == "csv":
            raise typer.BadParameter("CSV output needs --output.")
        if fmt == "jsonl":
            lines = [orjson.dumps(lease.to_dict()).decode() for lease in leases]
            text = "\n".join(lines)
        else:
            text = leases_to_json(leases, indent=True).decode()
        console.print(text, markup=False, highlight=False, soft_wrap=True)
        return

    if fmt == "csv":
        count = write_csv(leases, output)
    elif fmt == "jsonl":
        count = write_jsonl(leases, output)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(leases_to_json(leases))
        count = len(leases)
    console.print(f"[bold green]Wrote[/] {count} leases to {output}")


@app.command()
def render(
    input: Path = typer.Argument(..., help="dhcpd.leases file to re-emit."),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Optional path to write the rendered blocks."
    ),
    config: Path | None = typer.Option(None, "--config", "-c", help="Parser config (yaml/json)."),
) -> None:
    """Re-emit every lease through the block renderer."""
    leases = _read_leases(input, _load_config(config))
    text = render_leases(leases)
    if output:
        output.write_text(text)
        console.print(f"[bold green]Rendered[/] {len(leases)} leases to {output}")
    else:
        console.print(text, markup=False, highlight=False, soft_wrap=True, end="")


@app.command()
def summary(
    input: Path = typer.Argument(..., help="dhcpd.leases file to summarize."),
    config: Path | None = typer.Option(None, "--config", "-c", help="Parser config (yaml/json)."),
) -> None:
    """Print counts per binding state, distinct addresses and duplicates."""
    leases = _read_leases(input, _load_config(config))
    result = summarize_leases(leases)
    text = orjson.dumps(result, option=orjson.OPT_INDENT_2).decode()
    console.print(text, markup=False, highlight=False, soft_wrap=True)


@app.command()
def synthetic(
    output: Path = typer.Argument(..., help="Path to write the synthetic leases file."),
    metadata: Path | None = typer.Option(
        None, "--metadata", "-m", help="Optional path to write JSON metadata about blocks."
    ),
    count: int = typer.Option(8, "--count", "-c", help="Number of lease blocks to emit."),
    hosts: int = typer.Option(0, "--hosts", help="Number of host declarations to append."),
    seed: int = typer.Option(1234, "--seed", help="Seed for reproducible generation."),
) -> None:
    """Generate a dhcpd.leases file for fixtures and benchmarks."""
    data, meta = generate_leases_file(count=count, seed=seed, hosts=hosts)
    output.write_bytes(data)
    console.print(f"[bold green]Wrote[/] {len(data)} bytes to {output} ({len(meta)} blocks).")

    if metadata:
        metadata.write_bytes(orjson.dumps(meta, option=orjson.OPT_INDENT_2))
        console.print(f"[bold green]Wrote metadata[/] to {metadata}")


@app.command("config-template")
def config_template(
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the template here."),
) -> None:
    """Print or write a sample parser config."""
    if output is None:
        console.print(
            yaml.safe_dump(sample_config(), sort_keys=False), markup=False, highlight=False, end=""
        )
        return
    if output.suffix.lower() in {".yml", ".yaml"}:
        output.write_text(yaml.safe_dump(sample_config(), sort_keys=False))
    else:
        output.write_bytes(orjson.dumps(sample_config(), option=orjson.OPT_INDENT_2))
    console.print(f"[bold green]Wrote config template[/] to {output}")


if __name__ == "__main__":
    app()
