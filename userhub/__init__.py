"""
userhub

REST service for managing user resources.
"""

__version__ = "0.1.0"
