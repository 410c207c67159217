"""Prefix routing and traversal-safe path resolution."""

from burrow.routing.resolve import safe_join
from burrow.routing.router import PrefixRouter

__all__ = ["PrefixRouter", "safe_join"]
