"""Dispatch core for routing delivery orders to independent couriers."""

__version__ = "0.1.0"
