"""A small CPU ray tracer for spheres, with a thread-pool frame renderer."""

__version__ = "0.1.0"