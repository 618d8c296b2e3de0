"""Result views and writers."""

from .html_report import HTMLReportGenerator
from .results_writer import ResultsWriter
from .views import CompositeView, ConsoleView, ControlState, MemoryView, ResultsView

__all__ = [
    "CompositeView",
    "ConsoleView",
    "ControlState",
    "HTMLReportGenerator",
    "MemoryView",
    "ResultsView",
    "ResultsWriter",
]
