"""
Herbie Runner - a caravan that moves at the pace of its slowest hiker.
"""

__version__ = "0.1.0"
