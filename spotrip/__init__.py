"""
spotrip: download albums from a streaming catalog into tagged local files.
"""

__version__ = "0.1.0"
