"""
Schemas package for API validation and serialization.

Each resource has its own subpackage; shared envelope and summary shapes
live in ``schemas.common``.
"""
