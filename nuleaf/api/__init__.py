"""HTTP surface: one route group per entity kind"""

from nuleaf.api.app import create_app

__all__ = ["create_app"]
