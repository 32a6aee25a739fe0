"""
Cashflow Kernel

Read-side persistence, typed facts, clock, logging and error taxonomy for
the cash position and forecast engines.
"""

__version__ = "0.1.0"
