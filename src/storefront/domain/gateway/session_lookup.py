"""Abstract lookup of the signed-in identity."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.session import Session


class SessionLookup(ABC):

    @abstractmethod
    def current(self) -> Session | None:
        """Return the acting user's session, or None if signed out."""
