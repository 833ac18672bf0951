"""pixmatch: reconcile directories of near-duplicate images."""

__version__ = "0.1.0"
