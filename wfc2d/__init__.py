"""
wfc2d - Wave Function Collapse tile-grid solver.
"""

__version__ = "1.0.0"
