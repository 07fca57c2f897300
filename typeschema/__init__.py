"""typeschema: JSON Schema rendering for parsed type declarations."""

__version__ = "0.11.0"
