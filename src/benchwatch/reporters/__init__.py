"""Reporters module for benchwatch.

This module provides output formatters for comparison reports:
- Console: Terminal output with colors
- JSON: Machine-readable format
- Markdown: Job summaries, commit comments and workflow commands
"""

from __future__ import annotations

from benchwatch.reporters.console import ConsoleReporter
from benchwatch.reporters.json import JSONReporter
from benchwatch.reporters.markdown import MarkdownReporter, format_github_actions_alert

__all__ = [
    "ConsoleReporter",
    "JSONReporter",
    "MarkdownReporter",
    "format_github_actions_alert",
]
