# careernav/api/__init__.py
# This file makes the api directory a Python package.

from . import admin
from . import enrollments
from . import sessions

__all__ = [
    "admin",
    "enrollments",
    "sessions",
]
