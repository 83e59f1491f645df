"""Checkmate domain layer.

Pure models and services with no I/O. Subpackages:

- shared: Result type, error taxonomy, base event
- task: Task aggregate, ordering, spawning, statistics
- sprint: Sprint and sprint health
- tag: Tag catalogue entries
- routine: Routines and active routine determination
"""
