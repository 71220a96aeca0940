"""Version information for inspectdoc."""

__version__ = "0.3.0"
