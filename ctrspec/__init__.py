"""Parse and validate container run, stop and top flags into configuration values."""

__version__ = "0.1.0"