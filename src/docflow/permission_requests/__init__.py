"""Permission requests feature: owner requests and admin review"""

from .router import router

__all__ = ["router"]
