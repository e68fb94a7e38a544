"""CLI package.

The ``cli`` sub-package contains the Click application and its command
implementations.
"""
from __future__ import annotations
