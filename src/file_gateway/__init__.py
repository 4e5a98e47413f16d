"""
File Conversion Gateway package.

This module provides a FastAPI application exposing a single conversion
endpoint at `/api/convert`, backed by the domain layer in
`file_gateway.conversion`.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
