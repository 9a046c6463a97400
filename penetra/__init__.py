"""Penetration depth of convex shapes by expanding polytopes, and a simple text scanner."""

__version__ = "0.1.0"
__all__ = ["depth", "triedge", "parsing"]