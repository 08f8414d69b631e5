"""Utility functions and helpers."""

from pizzaparty.utils.datetime_utils import kitchen_today, to_api_timezone

__all__ = [
    "kitchen_today",
    "to_api_timezone",
]
