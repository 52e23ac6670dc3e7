"""Market snapshot providers."""

from src.data.static_params import StaticSnapshotProvider

__all__ = ["StaticSnapshotProvider"]
