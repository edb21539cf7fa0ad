from routescout.adapters.storage.route_file import RouteFileStore

__all__ = ["RouteFileStore"]
