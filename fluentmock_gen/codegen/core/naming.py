"""
Naming utilities for safe code generation.

Handles identifier cleanup, reserved-word conflicts and unique name
allocation within one emitted scope.
"""

import re
from typing import Dict, Optional, Set


class NameSanitizer:
    """Handles name sanitization and uniqueness."""

    def __init__(self, reserved_words: Set[str] = None, escape_prefix: Optional[str] = None):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            escape_prefix: Prefix that makes a reserved word a legal identifier
                (e.g. ``@`` in C#). When unset, a ``_`` suffix is appended instead.
        """
        self.reserved_words = reserved_words or set()
        self.escape_prefix = escape_prefix
        self._name_cache: Dict[str, str] = {}
        self._used_names: Set[str] = set()

    def sanitize_name(self, name: str) -> str:
        """
        Turn a name into a legal identifier in the target language.

        The result is cached and does not reserve the name; use
        :meth:`unique_name` for that.
        """
        if name in self._name_cache:
            return self._name_cache[name]

        final_name = self._escape_reserved(self._clean_basic(name))

        self._name_cache[name] = final_name
        return final_name

    def unique_name(self, name: str) -> str:
        """
        Sanitize a name and reserve it, appending a counter on collision.

        ``Method``, ``Method`` and ``Method`` become ``Method``, ``Method1`` and ``Method2``.
        """
        base = self.sanitize_name(name)
        candidate = base
        counter = 1
        while candidate in self._used_names:
            candidate = f"{base}{counter}"
            counter += 1

        self._used_names.add(candidate)
        return candidate

    def _clean_basic(self, name: str) -> str:
        """Basic name cleanup - replace characters that can't appear in identifiers."""
        cleaned = re.sub(r'[^a-zA-Z0-9_]', '_', name)

        # Ensure doesn't start with number
        if cleaned and cleaned[0].isdigit():
            cleaned = f"_{cleaned}"

        if not cleaned:
            cleaned = "value"

        return cleaned

    def _escape_reserved(self, name: str) -> str:
        """Make reserved words usable as identifiers."""
        if name not in self.reserved_words:
            return name
        if self.escape_prefix:
            return f"{self.escape_prefix}{name}"
        return f"{name}_"
