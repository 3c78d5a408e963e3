from __future__ import annotations

from typing import Iterable, List, Tuple

from .models import TransactionDraft


class DraftStore:
    """Append-only, ordered collection of drafts for one session.

    Owned by whoever creates it (the app keeps one on `app.state`). Drafts are
    frozen, so handing out a tuple snapshot is enough to keep the store safe
    from callers.
    """

    def __init__(self) -> None:
        self._drafts: List[TransactionDraft] = []

    def append(self, drafts: Iterable[TransactionDraft]) -> None:
        self._drafts.extend(drafts)

    def snapshot(self) -> Tuple[TransactionDraft, ...]:
        return tuple(self._drafts)

    def clear(self) -> int:
        removed = len(self._drafts)
        self._drafts = []
        return removed

    def __len__(self) -> int:
        return len(self._drafts)
