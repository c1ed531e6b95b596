"""
Shape geometry: boundary projection and connector routing
"""
from .projection import project
from .routing import edge_point, route

__all__ = ["project", "edge_point", "route"]
