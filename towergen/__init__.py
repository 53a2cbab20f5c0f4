"""
towergen - endless vertical terrain generation with a reachability safety model
"""

__version__ = "0.1.0"
