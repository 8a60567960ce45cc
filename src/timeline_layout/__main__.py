"""CLI Runner for the timeline layout engine.

Usage:
    timeline-layout lanes plan.json
    timeline-layout critical-path plan.json
    timeline-layout validate plan.json --from <id> --to <id> [--type fs]
    timeline-layout route plan.json [--mode all] [--highlight <id>] [--json]
"""

import json
import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from timeline_layout import __version__
from timeline_layout.config import get_settings
from timeline_layout.models import Dependency, DependencyType, TimelinePlan
from timeline_layout.utils.time_utils import format_duration

console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_plan(path: str) -> TimelinePlan:
    """Load a plan file, exiting with an error message if it is invalid."""
    try:
        return TimelinePlan.load_from_file(path)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error:[/red] could not load plan {escape(path)}: {escape(str(e))}")
        sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Timeline Layout Engine.

    Lane packing, critical path and edge routing for timeline plans.
    """
    _setup_logging(verbose)


@cli.command("lanes")
@click.argument("plan_file", type=click.Path(exists=True, dir_okay=False))
def show_lanes(plan_file: str):
    """Show the lane of every attachment."""
    from timeline_layout.services.lane_packer import pack_attachments

    plan = _load_plan(plan_file)
    packed = pack_attachments(plan.attachments)

    table = Table(title=f"Lanes for {plan.timeline.id}")
    table.add_column("Attachment", style="cyan")
    table.add_column("Project")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    table.add_column("Lane", justify="right", style="green")

    for attachment in plan.attachments:
        table.add_row(
            attachment.id,
            attachment.project_id,
            str(attachment.start),
            str(attachment.end),
            str(packed.lane_of[attachment.id]),
        )

    console.print(table)
    console.print(f"Lanes: {packed.lane_count}")


@cli.command("critical-path")
@click.argument("plan_file", type=click.Path(exists=True, dir_okay=False))
def show_critical_path(plan_file: str):
    """Show the longest chain of dependent attachments."""
    from timeline_layout.services.critical_path import CycleError, critical_path

    plan = _load_plan(plan_file)
    try:
        result = critical_path(plan.attachments, plan.dependencies)
    except CycleError as e:
        console.print(f"[red]Error:[/red] dependencies contain a cycle ({', '.join(e.remaining)})")
        sys.exit(1)

    if not result.ids:
        console.print("[yellow]No attachments on this timeline[/yellow]")
        return

    console.print(f"[bold]Critical path:[/bold] {' -> '.join(result.ids)}")
    console.print(
        f"  Total duration: {result.total_duration} ms ({format_duration(result.total_duration)})"
    )


@cli.command("validate")
@click.argument("plan_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--from", "from_id", required=True, help="Source attachment id")
@click.option("--to", "to_id", required=True, help="Target attachment id")
@click.option("--type", "dep_type", default=None,
              type=click.Choice([t.value for t in DependencyType]),
              help="Dependency type (default: fs)")
def validate(plan_file: str, from_id: str, to_id: str, dep_type: Optional[str]):
    """Check whether a new dependency could be added to the plan."""
    from timeline_layout.services.critical_path import CycleError, critical_path
    from timeline_layout.services.dependency_validator import validate_dependency

    plan = _load_plan(plan_file)
    candidate = Dependency(
        id="candidate",
        from_attachment_id=from_id,
        to_attachment_id=to_id,
        type=dep_type,
    )

    result = validate_dependency(candidate, plan.attachments_by_id(), plan.dependencies)
    if not result:
        console.print(f"[red]Rejected:[/red] {result.reason.value} - {result.message}")
        sys.exit(1)

    # The full graph check is authoritative
    try:
        critical_path(plan.attachments, [*plan.dependencies, candidate])
    except CycleError:
        console.print("[red]Rejected:[/red] cycle - This dependency would create a cycle")
        sys.exit(1)

    console.print(f"[green]OK:[/green] {from_id} -> {to_id}")


@cli.command("route")
@click.argument("plan_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--mode", default="all",
              type=click.Choice(["all", "selected", "incoming", "outgoing", "critical"]),
              help="Which dependencies to draw")
@click.option("--highlight", default=None, help="Highlighted attachment id")
@click.option("--width", type=float, default=None, help="Viewport width in px")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
def route(plan_file: str, mode: str, highlight: Optional[str], width: Optional[float],
          as_json: bool):
    """Lay out the plan and print SVG paths for its dependencies."""
    from timeline_layout.services.critical_path import CycleError, critical_path
    from timeline_layout.services.edges_layer import EdgeMode, EdgesLayer
    from timeline_layout.services.time_zoom import TimeZoom
    from timeline_layout.services.timeline_layout import TimelineLayout

    settings = get_settings()
    plan = _load_plan(plan_file)

    zoom = TimeZoom(
        viewport_width=width or settings.viewport_width,
        time_window=plan.time_window(),
        options=settings.zoom_options(),
    )
    layout = TimelineLayout(
        plan.attachments,
        zoom.to_x,
        row_height=settings.row_height,
        row_gap=settings.row_gap,
    )

    critical_ids = None
    if mode == EdgeMode.CRITICAL.value:
        try:
            critical_ids = critical_path(plan.attachments, plan.dependencies).ids
        except CycleError as e:
            console.print(f"[red]Error:[/red] {e}")
            sys.exit(1)

    edges = EdgesLayer(layout.rect_of, settings.lane_step, settings.route_options())
    paths = edges.compute_paths(
        plan.dependencies,
        mode=EdgeMode(mode),
        highlight_id=highlight,
        boxes=layout.rects(),
        critical_ids=critical_ids,
    )

    if as_json:
        output = [
            {"id": p.id, "d": p.d, "active": p.active, "back": p.back}
            for p in paths
        ]
        click.echo(json.dumps(output, indent=2))
        return

    table = Table(title=f"Edges for {plan.timeline.id}")
    table.add_column("Dependency", style="cyan")
    table.add_column("Back", justify="center")
    table.add_column("Path")

    for p in paths:
        name = f"[bold]{p.id}[/bold]" if p.active else p.id
        table.add_row(name, "yes" if p.back else "", p.d)

    console.print(table)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
