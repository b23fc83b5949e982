"""Artisan domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class ArtisanAlreadyExists(Exception):
    """An artisan with the same email already exists."""


class ArtisanNotFound(Exception):
    """The requested artisan does not exist or has been soft-deleted."""
