"""Documents feature: upload, reads, guarded update/remove"""

from .router import router

__all__ = ["router"]
