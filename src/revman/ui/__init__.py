"""Terminal UI for revman."""

from .selector import select_option

__all__ = ["select_option"]
