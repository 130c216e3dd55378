"""Rich-based presentation of build plans and logging setup."""

from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from buildgraph.graph.plan import BuildPlan
from buildgraph.models import DepNode

logger = logging.getLogger("buildgraph.display")


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Route logging through a RichHandler.

    Args:
        verbose: Enable DEBUG output instead of WARNING.
        console: Rich Console instance for coordinated output (optional).
    """
    level = logging.DEBUG if verbose else logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        log_time_format="[%H:%M:%S]",
    )

    logging.basicConfig(
        level=level,
        format="[%(name)s] [%(levelname)s] %(message)s",
        handlers=[handler],
    )


def format_node(node: DepNode) -> str:
    return f"{node.package_name}@{node.project_name}"


def build_plan_table(plan: BuildPlan, title: str = "Build plan") -> Table:
    """Return a table with one row per phase."""
    table = Table(title=title)
    table.add_column("Phase", justify="right", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("Packages", style="green")

    for phase, members in plan:
        labels = ", ".join(format_node(node) for node in sorted(members))
        table.add_row(str(phase), str(len(members)), labels)
    return table


def render_build_plan(plan: BuildPlan, console: Optional[Console] = None) -> None:
    """Print ``plan`` as a table."""
    console = console or Console()
    console.print(build_plan_table(plan))
    logger.debug("Rendered build plan with %d phase(s)", plan.num_phases)
