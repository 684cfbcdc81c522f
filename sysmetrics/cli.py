"""Command-line interface for the sysmetrics agent."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .agent import AgentConfig, run_agent
from .agent.collectors import SystemCollector, cpu_temperature, network_totals
from .errors import ConfigError

app = typer.Typer(
    name="sysmetrics-agent",
    help="Lightweight host telemetry agent",
    add_completion=False,
)

console = Console()


def load_config(config_file: Optional[Path], **overrides) -> AgentConfig:
    """Build the effective config: file or environment, then CLI overrides."""
    try:
        if config_file:
            config = AgentConfig.from_yaml(str(config_file))
        else:
            config = AgentConfig.from_env()
        return config.override(**overrides).validate()
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


@app.command()
def run(
    report: Optional[int] = typer.Option(None, "--report", "-r", help="Reporting interval in seconds"),
    host: Optional[str] = typer.Option(None, "--host", help="Collection API hostname"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Collection API port"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file"),
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="Log level"),
    ticks: Optional[int] = typer.Option(None, "--ticks", help="Stop after this many ticks"),
):
    """Sample host metrics and report them until interrupted."""
    config = load_config(
        config_file,
        report_interval=report,
        api_host=host,
        api_port=port,
        log_level=log_level,
    )

    console.print(f"[bold]Reporting every {config.report_interval}s to {config.endpoint}[/bold]")
    console.print("Press Ctrl+C to stop\n")

    run_agent(config, max_ticks=ticks)


@app.command()
def sample(
    interval: float = typer.Option(1.0, "--interval", "-i", help="CPU measurement window in seconds"),
):
    """Take one reading of every metric family and print it."""
    collector = SystemCollector()

    table = Table(title="Host Sample")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="green")

    readers = [
        ("CPU %", lambda: f"{collector.cpu_percent(interval):.1f}"),
        ("Memory used %", lambda: f"{collector.memory_percent():.1f}"),
        ("CPU temp (C)", lambda: _format_temp(cpu_temperature(collector.temperatures()))),
        ("Net bytes recv/sent", lambda: _format_net(network_totals(collector.net_counters()))),
    ]

    for label, read in readers:
        try:
            table.add_row(label, read())
        except Exception as e:
            table.add_row(label, f"[red]error: {e}[/red]")

    console.print(table)


def _format_temp(temp: Optional[float]) -> str:
    return "-" if temp is None else f"{temp:.1f}"


def _format_net(totals) -> str:
    return f"{totals.recv_bytes} / {totals.sent_bytes} ({totals.interfaces} ifaces)"


@app.command()
def config(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file"),
):
    """Show the effective configuration."""
    effective = load_config(config_file)
    data = effective.to_dict()
    data["endpoint"] = effective.endpoint
    console.print_json(json.dumps(data))


if __name__ == "__main__":
    app()
