from __future__ import annotations

from typing import Optional, Protocol

from .model import TermConfig


class TermConfigRepository(Protocol):
    def get_term_config(self) -> Optional[TermConfig]:
        """Return the configured term, or None when term.start_date is absent."""

        raise NotImplementedError

    def save_term_config(self, term: TermConfig) -> None:
        raise NotImplementedError
