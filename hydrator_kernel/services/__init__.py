"""Services for the hydrator kernel."""

from hydrator_kernel.services.hydrator_service import HydratorService

__all__ = [
    "HydratorService",
]
