"""Tag CLI commands."""

from typing import Optional

import typer

from checkmate.interfaces.cli.common import get_services, print_success, unwrap

app = typer.Typer(help="Tag commands")


@app.command("add")
def add(
    name: str = typer.Argument(..., help="Tag name"),
    capacity: Optional[int] = typer.Option(
        None, "--capacity", "-c", help="Default weekly capacity in points"
    ),
    icon: str = typer.Option("", "--icon", help="Icon (emoji)"),
    color: str = typer.Option("#6b7280", "--color", help="Display color"),
) -> None:
    """Create a tag."""
    services = get_services()
    tag = unwrap(services.tags.create_tag(name, capacity, icon=icon, color=color))
    print_success(f"Created tag {tag.name} (capacity {tag.default_capacity}, id {tag.id})")


@app.command("list")
def list_tags() -> None:
    """List tags with their default capacity."""
    services = get_services()
    for tag in services.tags.list_tags():
        icon = f"{tag.icon} " if tag.icon else ""
        typer.echo(f"{icon}{tag.name:<20} {tag.default_capacity:>4}  {tag.id}")
