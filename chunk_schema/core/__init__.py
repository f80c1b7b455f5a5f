"""
Core modules for chunk_schema.

This package contains table naming, index bucketing, schema generations
and their validation. Nothing here performs I/O.
"""
