"""
Drop configured keys (dotted paths allowed) from newline-delimited JSON records.
"""

__version__ = "0.1.0"
