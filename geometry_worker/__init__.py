"""Off-thread geometry computations behind a typed message protocol."""

from geometry_worker.protocol import handle_message
from geometry_worker.worker import GeometryWorker

__all__ = ["GeometryWorker", "handle_message"]
