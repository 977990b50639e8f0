"""Booking management REST API: providers publish slots, customers book them."""

__version__ = "1.0.0"
