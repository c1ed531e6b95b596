from .connectors import route_connector, route_connectors

__all__ = ["route_connector", "route_connectors"]
