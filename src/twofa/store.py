"""Ordered, immutable collection of enrolled accounts.

Every operation that changes the store returns a new one; insertion order is
the only ordering and is never rearranged.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, replace

from twofa import engine
from twofa.models import Account


class IndexOutOfRange(IndexError):
    """An account index outside the store's bounds. Always a programming error."""


@dataclass(frozen=True)
class AccountStore:
    accounts: tuple[Account, ...] = ()
    selected_index: int = 0

    def __len__(self) -> int:
        return len(self.accounts)

    def __iter__(self) -> Iterator[Account]:
        return iter(self.accounts)

    def _check(self, index: int) -> None:
        if not 0 <= index < len(self.accounts):
            raise IndexOutOfRange(f"account index {index} out of range (size {len(self.accounts)})")

    def add(self, name: str, issuer: str, secret: str) -> tuple[AccountStore, int]:
        """Append an account and select it. Returns the new store and the account's index."""
        index = len(self.accounts)
        store = replace(
            self,
            accounts=self.accounts + (Account(name=name, issuer=issuer, secret=secret),),
            selected_index=index,
        )
        return store, index

    def get(self, index: int) -> Account:
        self._check(index)
        return self.accounts[index]

    def select(self, index: int) -> AccountStore:
        self._check(index)
        return replace(self, selected_index=index)

    def move(self, delta: int) -> AccountStore:
        """Move the selection by ``delta``, clamped to the ends of the list."""
        if not self.accounts:
            return self
        index = min(max(self.selected_index + delta, 0), len(self.accounts) - 1)
        return self.select(index)

    @property
    def selected(self) -> Account | None:
        if not self.accounts:
            return None
        return self.get(self.selected_index)

    def refresh_all(self, timestamp: float) -> AccountStore:
        """Recompute every account's current code. Secrets and order are untouched."""
        refreshed = tuple(a.with_code(engine.derive_code(a.secret, timestamp)) for a in self.accounts)
        return replace(self, accounts=refreshed)
