"""
kerneltune

Device-management service exposing Linux kernel tunables as JSON methods
on the local service bus.
"""

__version__ = "1.0.0"
