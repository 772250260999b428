"""Nodes of the per-lesson graph."""

from notion2noji_core.graph.nodes.dispatch import create_dispatch_node
from notion2noji_core.graph.nodes.synthesize import create_synthesize_node
from notion2noji_core.graph.nodes.write_cards import create_write_cards_node

__all__ = [
    "create_dispatch_node",
    "create_synthesize_node",
    "create_write_cards_node",
]
