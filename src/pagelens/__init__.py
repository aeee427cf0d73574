"""pagelens - page modelling, element resolution and model versioning."""

__version__ = "0.1.0"
