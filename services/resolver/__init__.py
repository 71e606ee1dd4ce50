"""Sequence Resolver package.

Turns colon-separated announcement codes (e.g. "AB12CD34:WA1") into ordered audio file paths
using a preloaded MappingStore. Pure-python, deterministic. See `services/resolver/core.py`.
"""
