"""Command tasks for the runner."""

from runner.tasks.reset_state import reset_state, unmark_lesson
from runner.tasks.run_batch import ConnectivityError, run_batch
from runner.tasks.show_status import show_status

__all__ = [
    "ConnectivityError",
    "reset_state",
    "run_batch",
    "show_status",
    "unmark_lesson",
]
