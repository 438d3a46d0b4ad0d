"""
Session queue: ordered words for one sitting plus the relearn and delayed
side-queues.

The relearn queue holds words rated hard/again; on each advance its head is
moved (or inserted) a few positions after the current index and flagged
for a forced retest, so a failed word comes back before the session ends.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from core.fsrs.constants import RELEARN_GAP, SESSION_LIMIT_DEFAULT


@dataclass(frozen=True)
class SessionWord:
    """A single word reference in the session queue."""
    id: int
    word: str


class SessionQueue:
    """
    Main queue with cursor, relearn queue, delayed queue and the set of
    words flagged for a forced retest.

    `index` may run one past the end: that is how completion is reported.
    """

    def __init__(
        self,
        words: list[SessionWord],
        relearn_gap: int = RELEARN_GAP,
        batch_size: int = SESSION_LIMIT_DEFAULT
    ):
        self.relearn_gap = relearn_gap
        self.batch_size = max(1, batch_size)
        self.reset(words)

    def reset(self, words: list[SessionWord]) -> None:
        """Start over with a fresh word list."""
        self.items: list[SessionWord] = list(words)
        self.index = 0
        self.relearn_queue: list[int] = []
        self.delayed_queue: list[int] = []
        self.force_test: set[int] = set()
        self.ever_had_items = bool(self.items)
        self._known = {w.id: w for w in self.items}

    # ---- Cursor ----

    @property
    def current(self) -> Optional[SessionWord]:
        if 0 <= self.index < len(self.items):
            return self.items[self.index]
        return None

    @property
    def has_more(self) -> bool:
        return self.index + 1 < len(self.items)

    @property
    def is_complete(self) -> bool:
        """True once every item (including re-inserted ones) was resolved."""
        return self.ever_had_items and self.current is None and not self.delayed_queue

    @property
    def is_empty_at_start(self) -> bool:
        return not self.ever_had_items

    @property
    def progress(self) -> tuple[int, int]:
        """(position of the current item, items including delayed ones)"""
        total = len(self.items) + len(self.delayed_queue)
        return min(self.index + 1, total), total

    @property
    def retest_count(self) -> int:
        return len(self.force_test)

    def __len__(self) -> int:
        return len(self.items)

    # ---- Prefetch windows ----

    @property
    def batch_start(self) -> int:
        return (self.index // self.batch_size) * self.batch_size

    @property
    def batch_end(self) -> int:
        return min(self.batch_start + self.batch_size, len(self.items))

    @property
    def at_batch_end(self) -> bool:
        return not self.items or self.index == self.batch_end - 1

    def batch_word_ids(self) -> list[int]:
        """Word ids in the current prefetch window."""
        return [w.id for w in self.items[self.batch_start:self.batch_end]]

    # ---- Side queues ----

    def enqueue_relearn(self, word_id: int) -> None:
        """Queue a word for same-session re-exposure and flag it for retest."""
        if word_id not in self.relearn_queue:
            self.relearn_queue.append(word_id)
        self.force_test.add(word_id)

    def needs_test(self, word_id: int) -> bool:
        return word_id in self.force_test

    def clear_force_test(self, word_id: int) -> None:
        self.force_test.discard(word_id)

    def enqueue_delayed(self, word_id: int) -> None:
        self.delayed_queue.append(word_id)

    def peek_delayed(self) -> Optional[int]:
        return self.delayed_queue[0] if self.delayed_queue else None

    def shift_delayed(self) -> Optional[int]:
        return self.delayed_queue.pop(0) if self.delayed_queue else None

    # ---- Advance ----

    def _word(self, word_id: int) -> SessionWord:
        return self._known.get(word_id) or SessionWord(id=word_id, word=f"#{word_id}")

    def _interleave_relearn(self) -> int:
        """
        Move the head of the relearn queue `relearn_gap` positions past the
        cursor (or to the end when fewer remain).

        Returns:
            The index of the next item to show
        """
        next_index = self.index + 1
        if not self.relearn_queue:
            return next_index

        word_id = self.relearn_queue.pop(0)
        items = self.items
        existing = next((i for i, w in enumerate(items) if w.id == word_id), -1)

        if existing != -1:
            item = items.pop(existing)
            # Removing at or before the cursor shifts the next item left
            next_index = self.index if existing <= self.index else self.index + 1
        else:
            item = self._word(word_id)

        remaining = len(items) - (self.index + 1)
        target = self.index + self.relearn_gap + 1 if remaining > self.relearn_gap else len(items)
        items.insert(min(target, len(items)), item)

        self.force_test.add(word_id)
        return next_index

    def advance(self) -> Optional[SessionWord]:
        """
        Move past the current item, interleaving one relearn word.

        When the main queue runs out, explicitly deferred words are appended
        back one at a time.

        Returns:
            The new current item, or None when the session is complete
        """
        next_index = self._interleave_relearn()
        self.index = next_index if self.items else 0

        if self.current is None and self.delayed_queue:
            self.items.append(self._word(self.shift_delayed()))
            self.index = len(self.items) - 1

        return self.current

    def defer_current(self) -> Optional[SessionWord]:
        """Push the current word onto the delayed queue and move on."""
        current = self.current
        if current is None:
            return None
        self.items.pop(self.index)
        self.enqueue_delayed(current.id)
        if self.current is None:
            self.items.append(self._word(self.shift_delayed()))
        return self.current
