"""
Omaha hand-history parsing, showdown classification and note synthesis.
"""

__version__ = "0.1.0"
