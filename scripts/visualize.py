#!/usr/bin/env python3
"""
Visualization script for Sankey layouts.

Generates images for a few sample flow graphs into ./build/

Usage:
    uv run python scripts/visualize.py
"""

from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from sankey_layout import SankeyLayout

# Output directory
BUILD_DIR = Path(__file__).parent.parent / "build"

COLORS = plt.get_cmap("tab10").colors


def ensure_build_dir():
    """Create build directory if it doesn't exist."""
    BUILD_DIR.mkdir(exist_ok=True)


def visualize(layout, title="Sankey Layout", ax=None):
    """Visualize a completed layout on an axis."""
    result = layout.result
    width, height = layout.size

    # Draw links as thick polylines sampled from their curves
    for link in result.links:
        points = layout.link_path(link).sample(48)
        color = COLORS[link.source % len(COLORS)]
        # Band thickness in data units converted to points
        linewidth = max(link.dy * 72.0 * ax.figure.get_figheight() / height * 0.8, 0.5)
        ax.plot(
            points[:, 0],
            points[:, 1],
            color=color,
            alpha=0.35,
            linewidth=linewidth,
            solid_capstyle="butt",
        )

    # Draw nodes
    for node in result.nodes:
        ax.add_patch(
            Rectangle(
                (node.x, node.y),
                node.dx,
                node.dy,
                facecolor=COLORS[node.index % len(COLORS)],
                edgecolor="black",
                linewidth=0.5,
                zorder=5,
            )
        )

    # Label nodes
    for node, raw in zip(result.nodes, layout.nodes):
        label = getattr(raw, "name", None) or str(node.index)
        left = node.x < width / 2
        ax.annotate(
            label,
            (node.x + node.dx + 4 if left else node.x - 4, node.center),
            ha="left" if left else "right",
            va="center",
            fontsize=8,
            zorder=6,
        )

    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.set_title(title, fontsize=12, fontweight="bold")
    ax.axis("off")


def save_layout(name, nodes, links, filename, **options):
    """Generate and save a single layout image."""
    layout = SankeyLayout(nodes=nodes, links=links, size=(800, 500), **options)
    layout.run()

    fig, ax = plt.subplots(figsize=(10, 6.25))
    visualize(layout, name, ax=ax)
    plt.tight_layout()

    filepath = BUILD_DIR / filename
    fig.savefig(filepath, dpi=150, bbox_inches="tight", facecolor="white")
    plt.close(fig)
    print(f"  Saved: {filepath}")


def create_energy_graph():
    """Create a small energy flow graph."""
    names = [
        "Coal", "Gas", "Solar",
        "Power plant", "Grid",
        "Homes", "Industry", "Losses",
    ]
    nodes = [{"name": name} for name in names]
    links = [
        {"source": 0, "target": 3, "value": 50},
        {"source": 1, "target": 3, "value": 30},
        {"source": 1, "target": 6, "value": 15},
        {"source": 2, "target": 4, "value": 20},
        {"source": 3, "target": 4, "value": 55},
        {"source": 3, "target": 7, "value": 25},
        {"source": 4, "target": 5, "value": 45},
        {"source": 4, "target": 6, "value": 25},
        {"source": 4, "target": 7, "value": 5},
    ]
    return nodes, links


def create_budget_graph():
    """Create a budget graph with a source that feeds a late stage."""
    names = ["Salary", "Bonus", "Income", "Rent", "Food", "Savings", "Stocks", "Bonds"]
    nodes = [{"name": name} for name in names]
    links = [
        {"source": 0, "target": 2, "value": 60},
        {"source": 2, "target": 3, "value": 25},
        {"source": 2, "target": 4, "value": 15},
        {"source": 2, "target": 5, "value": 20},
        {"source": 1, "target": 5, "value": 10},
        {"source": 5, "target": 6, "value": 18},
        {"source": 5, "target": 7, "value": 12},
    ]
    return nodes, links


def generate_all():
    """Generate all visualization images."""
    ensure_build_dir()

    energy_nodes, energy_links = create_energy_graph()
    budget_nodes, budget_links = create_budget_graph()

    print("Generating Sankey layout images...")
    save_layout("Energy flow", energy_nodes, energy_links, "sankey_energy.png")
    save_layout(
        "Energy flow (no relaxation)",
        energy_nodes,
        energy_links,
        "sankey_energy_unrelaxed.png",
        iterations=0,
    )
    save_layout("Budget", budget_nodes, budget_links, "sankey_budget.png")
    save_layout(
        "Budget (sources right)",
        budget_nodes,
        budget_links,
        "sankey_budget_sources_right.png",
        sources_right=True,
    )

    print()
    print(f"All images saved to: {BUILD_DIR.absolute()}")


if __name__ == "__main__":
    generate_all()
