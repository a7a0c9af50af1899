"""
HTTP surface for sqlbrowse.
"""

from .app import BROWSER_KEY, create_app

__all__ = ["BROWSER_KEY", "create_app"]
