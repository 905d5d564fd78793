"""CLI package.

The ``cli`` sub-package contains the Click application and all command
implementations.  Commands import their dependencies lazily so that
``mailblocks --help`` stays fast.
"""
from __future__ import annotations
