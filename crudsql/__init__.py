"""crudsql - model-driven CRUD query engine."""

__version__ = "0.3.0"
