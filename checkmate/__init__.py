"""Checkmate - sprint-based task tracking with a focus queue.

Answers two questions for a single user: what to work on right now, and
whether the current week is overcommitted.
"""

__version__ = "0.1.0"
