"""School admin data layer: stores, change events, import/export and CLI."""

__version__ = "0.1.0"
