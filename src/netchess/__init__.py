"""netchess — two-peer chess over a direct TCP connection."""

__version__ = "0.1.0"
