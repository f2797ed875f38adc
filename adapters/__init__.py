"""
Adapters package - External service connections.
Real-time broadcast transport.
"""

from adapters import broadcast

__all__ = ["broadcast"]
