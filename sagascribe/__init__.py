"""
Saga Scribe annotation core.
"""
__version__ = "1.2.0"
