"""Pieces of a LevelDB-style key-value store: comparators, varints and block handles, the block format, an LRU cache, an asyncio front end, command helpers and a WSGI service."""

__version__ = "0.1.0"