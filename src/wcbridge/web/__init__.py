"""Web boundary layer.

Controllers validate presence of params, call the bridge service and shape
JSON responses. They hold no state of their own: the registries live in the
runtime attached to the application.
"""

__all__ = [
    "contracts",
    "controllers",
]
