"""Spherical Gaussian and H-basis lighting approximation, with camera, mesh and shader-source helpers."""

__version__ = "0.1.0"