"""A wireframe tube-shooter arcade game and the small engine behind it."""

__version__ = "0.1.0"