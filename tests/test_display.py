"""Tests for build plan rendering."""

from rich.console import Console

from buildgraph.display import build_plan_table, format_node, render_build_plan
from buildgraph.graph.plan import create_build_plan
from buildgraph.graph.store import overlays, star
from buildgraph.models import DepNode

A = DepNode("app", "main")
B = DepNode("json", "lib")
C = DepNode("log", "lib")


def test_format_node() -> None:
    assert format_node(B) == "json@lib"


def test_table_has_one_row_per_phase() -> None:
    plan = create_build_plan(overlays([star(A, [B, C])]))

    table = build_plan_table(plan)

    assert table.row_count == 2


def test_render_build_plan_lists_packages() -> None:
    console = Console(record=True, width=120)
    plan = create_build_plan(star(A, [B, C]))

    render_build_plan(plan, console=console)

    output = console.export_text()
    assert "json@lib, log@lib" in output
    assert "app@main" in output
