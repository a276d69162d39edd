"""
Orderly: organize files into category folders under a naming convention.
"""

__version__ = "1.0.0"
