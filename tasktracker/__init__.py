"""Task Tracker: authenticated task CRUD service and dashboard client."""

__version__ = "1.0.0"
