"""Stack Definition Language CLI entrypoint."""
import json
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from stackdef.compiler.compiler import ManifestCompiler
from stackdef.compiler.estimator import ResourceEstimator
from stackdef.compiler.manifest import ManifestBuilder
from stackdef.scaffold.generator import TemplateGenerator
from stackdef.sdl.converter import SDLConverter
from stackdef.sdl.errors import SDLError
from stackdef.sdl.optimizer import SDLOptimizer
from stackdef.sdl.parser import SDLParser
from stackdef.sdl.units import format_memory_size
from stackdef.validation.validator import SDLValidator

app = typer.Typer(help="stackdef - Stack Definition Language validator and manifest compiler")
console = Console()


def _load_valid(config: str, debug: bool):
    """Parse and validate a file, printing the problems if it is invalid."""
    sdl = SDLParser.load(config)
    result = SDLValidator(debug=debug).validate(sdl)
    for warning in result.warnings:
        console.print(f"[yellow]Warning: {escape(warning)}[/]")
    if not result.valid:
        for error in result.errors:
            console.print(f"[red]✗ {escape(error)}[/]")
        return None
    return sdl


def _dump(data, fmt: str) -> str:
    if fmt == "json":
        return json.dumps(data, indent=2)
    return yaml.safe_dump(data, sort_keys=False)


@app.command("validate")
def validate(
    config: str = typer.Option("deploy.yaml", "--config", "-c", help="Path to the SDL file"),
    debug: bool = typer.Option(False, "--debug", help="Print verbose debug information")
):
    """Validate an SDL file and list every problem found."""
    console.print(f"[bold blue]Validating {config}...[/]")

    try:
        content = Path(config).read_text()
    except FileNotFoundError as e:
        console.print(f"[bold red]Error: {escape(str(e))}[/]")
        raise typer.Exit(code=1)

    result = SDLValidator(debug=debug).validate_content(content)

    if result.errors or result.warnings:
        table = Table(title="SDL Validation")
        table.add_column("Level", style="cyan")
        table.add_column("Message")
        for error in result.errors:
            table.add_row("[red]ERROR[/]", escape(error))
        for warning in result.warnings:
            table.add_row("[yellow]WARNING[/]", escape(warning))
        console.print(table)

    if not result.valid:
        console.print(f"[bold red]✗ {len(result.errors)} error(s) found[/]")
        raise typer.Exit(code=1)

    console.print("[green]✓ SDL is valid[/]")


@app.command("compile")
def compile_sdl(
    config: str = typer.Option("deploy.yaml", "--config", "-c", help="Path to the SDL file"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write the provider manifest to this file"),
    fmt: str = typer.Option("yaml", "--format", "-f", help="Manifest output format: yaml or json"),
    debug: bool = typer.Option(False, "--debug", help="Print verbose debug information including the manifest")
):
    """Compile an SDL file into manifest groups."""
    console.print(f"[bold blue]Compiling {config}...[/]")

    try:
        sdl = _load_valid(config, debug)
        if sdl is None:
            raise typer.Exit(code=1)

        groups = ManifestCompiler(debug=debug).compile(sdl)
    except (SDLError, FileNotFoundError) as e:
        console.print(f"[bold red]Error: {escape(str(e))}[/]")
        raise typer.Exit(code=2)

    table = Table(title="Manifest Groups")
    table.add_column("Service", style="cyan")
    table.add_column("Placement")
    table.add_column("CPU", justify="right")
    table.add_column("Memory", justify="right")
    table.add_column("Storage", justify="right")
    table.add_column("Count", justify="right")
    table.add_column("Price", justify="right")
    for group in groups:
        table.add_row(
            group.name,
            group.placement,
            f"{group.resources.millicpu}m",
            format_memory_size(group.resources.memory),
            format_memory_size(group.resources.total_storage),
            str(group.count),
            f"{group.price.amount}{group.price.denom}",
        )
    console.print(table)

    manifest = ManifestBuilder.build(groups, version=sdl.version)
    rendered = _dump(manifest, fmt)

    if output:
        Path(output).write_text(rendered)
        console.print(f"[green]Manifest written to {output}[/]")

    if debug:
        console.print("\n[bold blue]Generated Manifest:[/]")
        console.print(rendered, markup=False)


@app.command("estimate")
def estimate(
    config: str = typer.Option("deploy.yaml", "--config", "-c", help="Path to the SDL file"),
    debug: bool = typer.Option(False, "--debug", help="Print verbose debug information")
):
    """Estimate total resources and cost of a deployment."""
    try:
        sdl = _load_valid(config, debug)
        if sdl is None:
            raise typer.Exit(code=1)

        totals = ResourceEstimator.estimate(ManifestCompiler(debug=debug).compile(sdl))
    except (SDLError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error: {escape(str(e))}[/]")
        raise typer.Exit(code=2)

    table = Table(title="Resource Estimate")
    table.add_column("Service", style="cyan")
    table.add_column("Placement")
    table.add_column("Count", justify="right")
    table.add_column("CPU", justify="right")
    table.add_column("Memory", justify="right")
    table.add_column("Storage", justify="right")
    table.add_column("Cost", justify="right")
    for entry in totals.breakdown:
        table.add_row(
            entry.service,
            entry.placement,
            str(entry.count),
            str(entry.cpu),
            format_memory_size(entry.memory),
            format_memory_size(entry.storage),
            f"{entry.total_cost}{entry.denom}",
        )
    console.print(table)

    console.print(f"Total CPU: [bold]{totals.total_cpu}[/]")
    console.print(f"Total memory: [bold]{format_memory_size(totals.total_memory)}[/]")
    console.print(f"Total storage: [bold]{format_memory_size(totals.total_storage)}[/]")
    for denom, amount in totals.cost.items():
        console.print(f"Total cost: [bold]{amount}{denom}[/] per block")


@app.command("init")
def init(
    template: str = typer.Argument("web-app", help="Template: web-app, api-server, database or worker"),
    output: str = typer.Option("deploy.yaml", "--output", "-o", help="Path for the generated SDL file"),
    name: Optional[str] = typer.Option(None, "--name", help="Service name"),
    image: Optional[str] = typer.Option(None, "--image", help="Container image"),
    count: Optional[int] = typer.Option(None, "--count", help="Replica count"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
    debug: bool = typer.Option(False, "--debug", help="Print verbose debug information")
):
    """Write a starter SDL file from a template."""
    output_path = Path(output)
    if output_path.exists() and not force:
        console.print(f"[bold yellow]WARNING: {output} already exists.[/]")
        console.print("[yellow]Use --force to overwrite the existing file.[/]")
        raise typer.Exit(code=1)

    try:
        generator = TemplateGenerator(debug=debug)
        content = generator.render(template, name=name, image=image, count=count)
        # Rendered templates must parse
        SDLParser.parse(content)
    except (ValueError, SDLError) as e:
        console.print(f"[bold red]Error: {escape(str(e))}[/]")
        raise typer.Exit(code=1)

    output_path.write_text(content)
    console.print(f"[green]SDL template '{template}' written to {output}[/]")


@app.command("convert")
def convert(
    config: str = typer.Option("deploy.yaml", "--config", "-c", help="Path to the SDL v1 file"),
    output: str = typer.Option("deploy-v2.yaml", "--output", "-o", help="Path for the converted SDL file")
):
    """Convert an SDL v1 file to the v2 layout."""
    try:
        with open(config, 'r') as f:
            data = yaml.safe_load(f)
    except (FileNotFoundError, yaml.YAMLError) as e:
        console.print(f"[bold red]Error: {escape(str(e))}[/]")
        raise typer.Exit(code=1)

    if not isinstance(data, dict):
        console.print("[bold red]Error: Invalid SDL syntax[/]")
        raise typer.Exit(code=1)

    Path(output).write_text(yaml.safe_dump(SDLConverter.convert_to_v2(data), sort_keys=False))
    console.print(f"[green]Converted SDL written to {output}[/]")
    console.print("[yellow]Add a 'default' placement profile with pricing before deploying.[/]")


@app.command("optimize")
def optimize(
    config: str = typer.Option("deploy.yaml", "--config", "-c", help="Path to the SDL file"),
    output: str = typer.Option("deploy-optimized.yaml", "--output", "-o", help="Path for the optimized SDL file"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file")
):
    """Halve over-provisioned cpu, memory and storage requests."""
    output_path = Path(output)
    if output_path.exists() and not force:
        console.print(f"[bold yellow]WARNING: {output} already exists.[/]")
        console.print("[yellow]Use --force to overwrite the existing file.[/]")
        raise typer.Exit(code=1)

    try:
        with open(config, 'r') as f:
            data = yaml.safe_load(f)
    except (FileNotFoundError, yaml.YAMLError) as e:
        console.print(f"[bold red]Error: {escape(str(e))}[/]")
        raise typer.Exit(code=1)

    if not isinstance(data, dict):
        console.print("[bold red]Error: Invalid SDL syntax[/]")
        raise typer.Exit(code=1)

    optimized = SDLOptimizer.optimize(data)

    table = Table(title="Compute Profiles")
    table.add_column("Profile", style="cyan")
    table.add_column("CPU", justify="right")
    table.add_column("Memory", justify="right")
    table.add_column("Storage", justify="right")
    compute = (optimized.get("profiles") or {}).get("compute") or {}
    for name, profile in compute.items():
        resources = (profile or {}).get("resources") or {}
        storage = resources.get("storage") or [{}]
        volume = storage[0] if isinstance(storage, list) else storage
        table.add_row(
            escape(str(name)),
            escape(str((resources.get("cpu") or {}).get("units", "-"))),
            escape(str((resources.get("memory") or {}).get("size", "-"))),
            escape(str(volume.get("size", "-"))),
        )
    console.print(table)

    output_path.write_text(yaml.safe_dump(optimized, sort_keys=False))
    console.print(f"[green]Optimized SDL written to {output}[/]")


if __name__ == "__main__":
    app()
