"""Destinations for generated flashcards."""

from notion2noji_core.exporters.base import BaseCardSink
from notion2noji_core.exporters.noji import NojiCardSink
from notion2noji_core.exporters.tsv import TsvCardSink, export_tsv

__all__ = ["BaseCardSink", "NojiCardSink", "TsvCardSink", "export_tsv"]
