"""LensLink booking core: scheduling, lifecycle and reassignment for a photographer marketplace."""

__version__ = "0.1.0"
