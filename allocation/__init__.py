"""
Vendor Allocation Module.

This module matches placed water orders to the nearest online vendor that
stocks every requested brand and has the customer inside its service radius.
"""

__version__ = '0.1.0'
