"""
Depot - uniform file handles over interchangeable storage backends.

This package provides:
- A lazily-opened file handle that works with any storage backend
- In-memory, local filesystem and S3 backends
- Deterministic, signed download URLs for stored files
"""

__version__ = "1.0.0"
__author__ = "Depot Team"
