DEFAULT_MAX_ASYNC_DEFERRALS = 100
"""Deferred resolutions allowed within one unresolved call chain."""

DEFAULT_CONTAINER_NAME = "Global container"
RESOLUTION_CONTAINER_NAME = "Resolution container"
