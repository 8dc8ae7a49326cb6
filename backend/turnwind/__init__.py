"""
turnwind - wind estimation from GPS fixes recorded while circling.
"""

__version__ = "1.0.0"
