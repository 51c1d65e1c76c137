"""Two-body trajectory simulation with bounded-memory trail stores."""

__version__ = "1.0.0"
