"""bragi-probe CLI entry point."""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="bragi-probe",
    help="Probe search-service environments and list their indices",
    no_args_is_help=True,
)
console = Console()

_STYLES = {
    "available": "green",
    "unreachable": "yellow",
    "service_unreachable": "red",
    "backend_unreachable": "yellow",
}


def _load(path: Path | None):
    from bragi_probe.config.loader import load_config

    try:
        return load_config(path=path)
    except FileNotFoundError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)


def _styled(value: str) -> str:
    style = _STYLES.get(value, "red")
    return f"[{style}]{value}[/{style}]"


@app.callback()
def main_callback(
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level for diagnostics on stderr"),
) -> None:
    from bragi_probe.logging_config import setup_logging

    setup_logging(log_level)


@app.command()
def probe(
    environment: str = typer.Argument(help="Name of the environment to probe"),
    path: Path | None = typer.Option(None, "--path", "-p", help="Path to .bragi-probe.yaml or env.json"),
) -> None:
    """Probe a single environment and print its status as JSON."""
    from bragi_probe.registry.registry import EnvironmentRegistry

    config = _load(path)
    registry = EnvironmentRegistry(config)
    if registry.get_url(environment) is None:
        known = ", ".join(registry.environment_names) or "none"
        console.print(f"[red]{environment} is not a known environment. Use one of {known}[/red]")
        raise typer.Exit(1)

    status = registry.probe_one_sync(environment)
    assert status is not None
    typer.echo(json.dumps(status.to_dict()))


@app.command()
def status(
    path: Path | None = typer.Option(None, "--path", "-p", help="Path to .bragi-probe.yaml or env.json"),
) -> None:
    """Show every configured environment with service and backend status."""
    from bragi_probe.registry.registry import EnvironmentRegistry

    config = _load(path)
    statuses = EnvironmentRegistry(config).probe_all_sync()

    table = Table(title="Environment Status")
    table.add_column("Environment", style="bold")
    table.add_column("URL")
    table.add_column("Service")
    table.add_column("Version")
    table.add_column("Backend")
    table.add_column("Indices", justify="right")

    for s in statuses:
        if s.reachable and s.backend is not None:
            backend = _styled(s.backend.availability.value)
            index_count = str(len(s.backend.indices))
        else:
            backend = "—"
            index_count = "—"
        table.add_row(s.label, s.url, _styled(s.availability.value), s.version or "—", backend, index_count)

    console.print(table)


@app.command()
def indices(
    environment: str = typer.Argument(help="Name of the environment whose indices to list"),
    path: Path | None = typer.Option(None, "--path", "-p", help="Path to .bragi-probe.yaml or env.json"),
) -> None:
    """List the decoded indices of one environment's backend."""
    from bragi_probe.registry.models import BackendAvailability, PrivacyTier
    from bragi_probe.registry.registry import EnvironmentRegistry

    config = _load(path)
    registry = EnvironmentRegistry(config)
    if registry.get_url(environment) is None:
        console.print(f"[red]Unknown environment: {environment}[/red]")
        raise typer.Exit(1)

    status = registry.probe_one_sync(environment)
    if status is None or not status.reachable or status.backend is None:
        console.print(f"[red]Service of {environment} is unreachable[/red]")
        raise typer.Exit(1)
    if status.backend.availability is not BackendAvailability.AVAILABLE:
        console.print(f"[yellow]Backend of {environment} at {status.backend.url} is unreachable[/yellow]")
        raise typer.Exit(1)

    table = Table(title=f"{environment} indices (prefix {status.backend.index_prefix})")
    table.add_column("Index", style="bold")
    table.add_column("Type")
    table.add_column("Coverage")
    table.add_column("Private")
    table.add_column("Created")
    table.add_column("Documents", justify="right")

    for idx in status.backend.indices:
        private = "[magenta]yes[/magenta]" if idx.privacy_tier is PrivacyTier.PRIVATE else ""
        table.add_row(
            idx.label,
            idx.service_type,
            idx.coverage_region,
            private,
            idx.created_at.strftime("%Y-%m-%d %H:%M:%S"),
            f"{idx.document_count:,}",
        )

    console.print(table)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind host"),
    port: int = typer.Option(8080, help="Bind port"),
) -> None:
    """Start the environment status API server."""
    import uvicorn

    console.print(f"[bold]bragi-probe[/bold] starting on http://{host}:{port}")
    uvicorn.run("bragi_probe.api.app:app", host=host, port=port, reload=False)


config_app = typer.Typer(name="config", help="Configuration commands")
app.add_typer(config_app)


@config_app.command("validate")
def config_validate(
    path: Path | None = typer.Option(None, "--path", "-p", help="Path to .bragi-probe.yaml or env.json"),
) -> None:
    """Validate configuration file."""
    import httpx
    import yaml

    from bragi_probe.config.loader import load_config

    errors: list[str] = []
    try:
        config = load_config(path=path)
        console.print("[green]✓[/green] Configuration parses correctly")
        console.print("[green]✓[/green] Pydantic validation passes")
    except FileNotFoundError as exc:
        console.print(f"[red]✗ {exc}[/red]")
        raise typer.Exit(1)
    except yaml.YAMLError as exc:
        console.print(f"[red]✗ YAML parsing failed: {exc}[/red]")
        raise typer.Exit(1)
    except ValueError as exc:
        console.print(f"[red]✗ Validation failed: {exc}[/red]")
        raise typer.Exit(1)

    for entry in config.environments:
        try:
            parsed = httpx.URL(entry.url)
        except httpx.InvalidURL:
            parsed = None
        if parsed is None or parsed.scheme not in ("http", "https") or not parsed.host:
            errors.append(f"Environment '{entry.env}': invalid URL '{entry.url}'")
        else:
            console.print(f"[green]✓[/green] Environment '{entry.env}' URL is valid")

    if errors:
        for err in errors:
            console.print(f"[red]✗ {err}[/red]")
        console.print(f"\n[red bold]{len(errors)} validation error(s) found.[/red bold]")
        raise typer.Exit(1)

    if not config.environments:
        console.print("[yellow]! No environments configured[/yellow]")
    console.print("\n[green bold]Configuration is valid.[/green bold]")


@config_app.command("show")
def config_show(
    path: Path | None = typer.Option(None, "--path", "-p", help="Path to .bragi-probe.yaml or env.json"),
) -> None:
    """Print resolved configuration."""
    config = _load(path)

    console.print(f"[bold]{config.probe.name}[/bold] v{config.probe.version}\n")
    console.print(f"[bold]Request timeout:[/bold] {config.http.request_timeout}s")
    console.print(f"[bold]Default index prefix:[/bold] {config.index_prefix_default}\n")

    console.print("[bold]Environments:[/bold]")
    for entry in config.environments:
        console.print(f"  {entry.env}: {entry.url}")


def main() -> None:
    app()
