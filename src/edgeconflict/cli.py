"""Command Line Interface for the edge conflict engine.

This module provides a simple CLI for inspecting projects, resolving
wall colors, validating placements and applying editing operations.
"""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .core.model import Document
from .core.topology import conflict_groups
from .engine.api import apply as apply_operation
from .engine.api import apply_operations, edge_colors, instance_edge_colors
from .engine.ops import list_operations
from .engine.resolver import OverrideLookup, competing_colors
from .engine.validators import InvalidOperation, find_invalid_pairs
from .io.parser import load_document, save_document
from .io.store import FileStore, publish_document

app = typer.Typer(
    name="edge-conflict",
    help="A CLI tool for floor-plan edge conflict resolution",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load(path: Path) -> Document:
    try:
        return load_document(path)
    except FileNotFoundError as e:
        console.print(f"[red]Error: File not found - {e}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def _read_json(path: Path):
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        console.print(f"[red]Error: File not found - {e}[/red]")
        raise typer.Exit(1)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: Invalid JSON - {e}[/red]")
        raise typer.Exit(1)


@app.command()
def info(
    file: Path = typer.Option(..., "--file", "-f", help="Path to project JSON file"),
):
    """Show information about a project."""
    document = _load(file)

    console.print(f"[bold]Project: {document.file_name}[/bold] ({file})")
    console.print(f"Mode: [magenta]{document.mode.value}[/magenta]")
    console.print(
        "Color priority: " + (", ".join(c.value for c in document.color_priority) or "-")
    )
    console.print()

    console.print(f"[cyan]Rooms: {len(document.rooms)}[/cyan]")
    table = Table()
    table.add_column("Room ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Position", justify="center")
    table.add_column("Size", justify="center")
    table.add_column("Color", style="magenta")
    table.add_column("Created", justify="right")

    for room in document.rooms.values():
        table.add_row(
            room.id,
            room.name,
            f"({room.x}, {room.y})",
            f"{room.width}x{room.height}",
            room.color.value,
            str(room.created_at),
        )

    console.print(table)

    console.print(f"\n[cyan]Edges: {len(document.edges)}[/cyan]")

    if document.templates:
        console.print(f"\n[cyan]Templates: {len(document.templates)}[/cyan]")
        template_table = Table()
        template_table.add_column("Template ID", style="cyan")
        template_table.add_column("Name", style="green")
        template_table.add_column("Rooms", style="yellow")
        template_table.add_column("Instances", justify="center")

        for template in document.templates.values():
            count = sum(1 for i in document.instances.values() if i.template_id == template.id)
            template_table.add_row(
                template.id, template.name, ", ".join(template.room_ids), str(count)
            )

        console.print(template_table)

    if document.links:
        console.print(f"\n[cyan]Linked files: {len(document.links)}[/cyan]")
        for link in document.links.values():
            status = " [yellow](updates available)[/yellow]" if link.has_updates else ""
            imported = len(link.imported_template_ids)
            console.print(f"  {link.id}: {link.linked_file_name} - {imported} template(s) imported{status}")

    groups = conflict_groups(document)
    if groups:
        console.print(f"\n[cyan]Conflict groups: {len(groups)}[/cyan]")
        for group in groups:
            console.print("  " + ", ".join(sorted(group)))


@app.command()
def resolve(
    file: Path = typer.Option(..., "--file", "-f", help="Path to project JSON file"),
    segment_overrides: bool = typer.Option(
        False, "--segment-overrides", help="Only apply overrides set on the segment itself"
    ),
    conflicts_only: bool = typer.Option(
        False, "--conflicts-only", help="Only list segments with more than one competing room"
    ),
    instances: bool = typer.Option(
        False, "--instances", help="Also resolve the walls of placed template instances"
    ),
):
    """Resolve the display color of every wall segment."""
    document = _load(file)
    lookup = OverrideLookup.SEGMENT if segment_overrides else OverrideLookup.WALL

    colors = edge_colors(document, lookup)
    rooms = document.room_list()
    edges = document.edge_list()

    table = Table(title=f"Edge colors ({document.mode.value})")
    table.add_column("Edge ID", style="cyan")
    table.add_column("From", justify="center")
    table.add_column("To", justify="center")
    table.add_column("Competing", style="yellow")
    table.add_column("Color", style="magenta")

    for edge in edges:
        competing = competing_colors(edge, rooms, edges, lookup)
        if conflicts_only and len(competing) < 2:
            continue
        hex_color = colors[edge.id]
        table.add_row(
            edge.id,
            f"({edge.x1}, {edge.y1})",
            f"({edge.x2}, {edge.y2})",
            ", ".join(c.color.value for c in competing),
            f"[{hex_color}]{hex_color}[/]",
        )

    console.print(table)

    if instances:
        table = Table(title="Instance edge colors")
        table.add_column("Edge ID", style="cyan")
        table.add_column("Color", style="magenta")
        for edge_id, hex_color in instance_edge_colors(document, lookup).items():
            table.add_row(edge_id, f"[{hex_color}]{hex_color}[/]")
        console.print(table)


@app.command()
def validate(
    file: Path = typer.Option(..., "--file", "-f", help="Path to project JSON file"),
):
    """Check that no two rooms overlap by more than a shared wall."""
    document = _load(file)
    invalid = find_invalid_pairs(document.room_list())

    if not invalid:
        console.print(f"[green]All {len(document.rooms)} rooms are legally placed[/green]")
        return

    table = Table(title="Illegal overlaps")
    table.add_column("Room", style="cyan")
    table.add_column("Room", style="cyan")
    for first, second in invalid:
        table.add_row(first, second)
    console.print(table)
    raise typer.Exit(1)


@app.command()
def apply(
    file: Path = typer.Option(..., "--file", "-f", help="Path to project JSON file"),
    operation: Path = typer.Option(..., "--op", help="Path to operation JSON file"),
    output: Path = typer.Option(..., "--out", help="Path to output project JSON file"),
):
    """Apply an operation to a project."""
    document = _load(file)
    operation_data = _read_json(operation)

    console.print(f"[green]✓[/green] Loaded project from {file}")

    try:
        modified = apply_operation(document, operation_data)
    except (ValueError, InvalidOperation) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if modified == document:
        console.print("[yellow]Operation left the project unchanged[/yellow]")
    else:
        console.print(f"[green]✓[/green] Applied {operation_data.get('op') or operation_data.get('type')}")

    save_document(modified, output)
    console.print(f"[green]✓[/green] Result saved to {output}")


@app.command("apply-sequence")
def apply_sequence(
    file: Path = typer.Option(..., "--file", "-f", help="Path to project JSON file"),
    operations: Path = typer.Option(..., "--ops", help="Path to JSON file with a list of operations"),
    output: Path = typer.Option(..., "--out", help="Path to output project JSON file"),
    independent: bool = typer.Option(
        False, "--independent", help="Apply every operation to the original project"
    ),
):
    """Apply a list of operations, reporting the outcome of each."""
    document = _load(file)
    operations_data = _read_json(operations)
    if not isinstance(operations_data, list):
        console.print("[red]Error: Operations file must contain a JSON list[/red]")
        raise typer.Exit(1)

    final, results = apply_operations(document, operations_data, sequential=not independent)

    table = Table(title="Operations")
    table.add_column("#", justify="right")
    table.add_column("Operation", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Details")

    for result in results:
        op_name = result["operation"].get("op") or result["operation"].get("type") or "?"
        if result["success"]:
            status = "[green]OK[/green]" if result["changed"] else "[yellow]NO-OP[/yellow]"
            details = f"{len(result['invalid_pairs'])} illegal overlaps" if result["invalid_pairs"] else ""
        else:
            status = "[red]FAILED[/red]"
            details = result["error"]
        table.add_row(str(result["operation_index"] + 1), op_name, status, details)

    console.print(table)

    save_document(final, output)
    console.print(f"[green]✓[/green] Result saved to {output}")

    if not all(r["success"] for r in results):
        raise typer.Exit(1)


@app.command()
def operations():
    """List the available operations."""
    for name in list_operations():
        console.print(name)


@app.command()
def publish(
    file: Path = typer.Option(..., "--file", "-f", help="Path to project JSON file"),
    store: Path = typer.Option(Path("published"), "--store", "-s", help="Published files directory"),
):
    """Publish a project to the file store."""
    document = _load(file)
    try:
        record = publish_document(FileStore(store), document)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Published '{record.name}' as {record.id}")


@app.command()
def files(
    store: Path = typer.Option(Path("published"), "--store", "-s", help="Published files directory"),
    delete: Optional[str] = typer.Option(None, "--delete", help="Delete the file with this id"),
    export: Optional[str] = typer.Option(None, "--export", help="Write the file with this id to --out"),
    output: Optional[Path] = typer.Option(None, "--out", help="Output path for --export"),
):
    """List, export or delete published files."""
    file_store = FileStore(store)

    if delete is not None:
        if not file_store.delete(delete):
            console.print(f"[red]Error: File not found - {delete}[/red]")
            raise typer.Exit(1)
        console.print(f"[green]✓[/green] Deleted {delete}")
        return

    if export is not None:
        record = file_store.get(export)
        if record is None or output is None:
            console.print("[red]Error: --export needs an existing id and --out[/red]")
            raise typer.Exit(1)
        output.write_text(record.app_state, encoding="utf-8")
        console.print(f"[green]✓[/green] Exported '{record.name}' to {output}")
        return

    table = Table(title=f"Published files ({store})")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Published", style="yellow")
    table.add_column("Units", justify="right")

    for record in file_store.list_all():
        table.add_row(record.id, record.name, record.timestamp, str(record.unit_count))

    console.print(table)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
