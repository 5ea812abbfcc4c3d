"""
TRMNL BYOS - backend for "bring your own server" e-ink terminals.
"""

__version__ = "0.1.0"
