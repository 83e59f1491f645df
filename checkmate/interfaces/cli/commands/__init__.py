"""CLI command groups."""

from checkmate.interfaces.cli.commands import routine, session, sprint, tag, task

__all__ = ["routine", "session", "sprint", "tag", "task"]
