from .base import NodeApiProvider
from .node_api import NodeApiClient

__all__ = [
    "NodeApiProvider",
    "NodeApiClient",
]
