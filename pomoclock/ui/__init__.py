"""UI package."""

from .duration_form import DurationForm

__all__ = ["DurationForm"]
