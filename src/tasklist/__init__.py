"""tasklist: a local, single-user task list with a persistent store."""

__version__ = "1.0.0"
