"""
Remote-facing stages: bulk fetch of liked tracks and managed playlist upkeep.
"""
from __future__ import annotations

__all__ = ["fetch", "playlist"]
