"""
Roll-up Gate Quoting System.

Prices custom roll-up gates, selects motor and axle hardware per gate,
and stores confirmed quotes with their clients.
"""

__version__ = "1.0.0"
