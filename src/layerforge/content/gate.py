"""
Latest-result gate for asynchronous resolutions.

Fast game/mod switches can leave several resolutions in flight. Only the
result of the most recently issued one may be adopted; anything older is
dropped, never merged into the current state.
"""

from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ResultGate(Generic[T]):
    """Issues tokens and adopts only results carrying the newest token."""

    def __init__(self):
        self._issued = 0
        self._adopted: Optional[T] = None

    def issue(self) -> int:
        """Start a new resolution and return its token."""
        self._issued += 1
        return self._issued

    def invalidate(self) -> None:
        """Supersede every outstanding token and drop the adopted result."""
        self._issued += 1
        self._adopted = None

    def is_current(self, token: int) -> bool:
        """Return True if no newer resolution has been issued."""
        return token == self._issued

    def offer(self, token: int, result: T) -> bool:
        """Adopt ``result`` if ``token`` is still current.

        Returns:
            True if the result was adopted, False if it was stale
        """
        if not self.is_current(token):
            return False
        self._adopted = result
        return True

    @property
    def adopted(self) -> Optional[T]:
        """The most recently adopted result."""
        return self._adopted
