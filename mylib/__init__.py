"""
mylib: OpenLibrary book lookups with in-process TTL caching.
"""

__version__ = "1.0.0"
