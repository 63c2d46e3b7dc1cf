"""Token usage helpers package."""

from .extraction import find_usage, normalize_usage, usage_dict

__all__ = ["find_usage", "normalize_usage", "usage_dict"]
