"""
Weekly meeting availability planner.
"""

__version__ = "0.1.0"
