"""Handler layer for HTTP endpoints.

Handlers depend on the worker service, not directly on repositories.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Worker) -> (Cache storage / network)
"""

from .proxy_handler import ProxyHandler
from .worker_handler import WorkerHandler

__all__ = [
    "ProxyHandler",
    "WorkerHandler",
]
