"""LangGraph pipeline for a single lesson."""

from notion2noji_core.graph.build_lesson_graph import build_lesson_graph
from notion2noji_core.graph.state import LessonPipelineState

__all__ = ["LessonPipelineState", "build_lesson_graph"]
