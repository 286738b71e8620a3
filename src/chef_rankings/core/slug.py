"""Slug generation utilities for chef identifiers."""

from __future__ import annotations

import re
import unicodedata


class SlugGenerator:
    """Generate URL-safe slugs from chef names.

    Accents are folded to their ASCII base letters so that "Dominique Crenn"
    and "Dominique Crénn" collide on the same slug.
    """

    def __init__(self, max_length: int | None = 80) -> None:
        """Initialize slug generator.

        Args:
            max_length: Maximum length for generated slugs. Use None to disable truncation.
        """
        self.max_length = max_length

    def slugify(self, value: str) -> str:
        """Generate a URL-safe slug from free text."""
        return self.truncate(self._slugify(value))

    def truncate(self, value: str) -> str:
        """Truncate a value to the configured max length."""
        if self.max_length is None:
            return value
        return value[: self.max_length].rstrip("-")

    @staticmethod
    def _slugify(value: str) -> str:
        decomposed = unicodedata.normalize("NFD", value.lower())
        ascii_only = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
        return re.sub(r"[^a-z0-9]+", "-", ascii_only).strip("-")
