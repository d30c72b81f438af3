"""
Display utilities for class loader contexts.

Renders a context as a rich tree, one branch per tier in serialization order.
"""

from __future__ import annotations

from rich.console import Console
from rich.tree import Tree

from dexclc.context import ClassLoaderContextMap


def build_tree(clc_map: ClassLoaderContextMap | None, title: str = "class loader context") -> Tree:
    """
    Build a rich Tree for *clc_map*.

    Example output::

        class loader context
        ├── 29
        │   ├── android.hidl.manager-V1.0-java
        │   └── android.hidl.base-V1.0-java
        └── any
            ├── a
            └── b
    """
    tree = Tree(f"[bold]{title}[/bold]")
    if clc_map is None:
        tree.add("[red]unknown[/red]")
        return tree

    for tier, entries in clc_map.items():
        branch = tree.add(f"[cyan]{tier.label}[/cyan]")
        for entry in entries:
            node = branch.add(f"[green]{entry.name}[/green]")
            node.add(f"host: {entry.build_path}")
            node.add(f"device: {entry.install_path}")
    return tree


def display_class_loader_context(
    clc_map: ClassLoaderContextMap | None,
    console: Console | None = None,
    title: str = "class loader context",
) -> None:
    """Print *clc_map* as a tree."""
    if console is None:
        console = Console()
    console.print(build_tree(clc_map, title=title))
