# store/journal.py
"""
Undo journal shared by the store backends

Writes made inside transaction() register an undo step. If the block
raises, the steps run in reverse order and the exception propagates, so a
failed registry call leaves no partial state behind.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator

logger = logging.getLogger(__name__)


class JournaledStore:
    """Re-entrant transaction boundary with rollback"""

    def __init__(self):
        self._lock = threading.RLock()
        self._journal = threading.local()

    @contextmanager
    def transaction(self) -> Iterator['JournaledStore']:
        with self._lock:
            # Nested blocks join the outermost transaction
            if getattr(self._journal, 'undo', None) is not None:
                yield self
                return

            self._journal.undo = []
            try:
                yield self
            except BaseException:
                self._rollback()
                raise
            finally:
                self._journal.undo = None

    def _record_undo(self, step: Callable[[], None]) -> None:
        undo = getattr(self._journal, 'undo', None)
        if undo is not None:
            undo.append(step)

    def _rollback(self) -> None:
        steps = self._journal.undo
        logger.warning(f"Rolling back transaction ({len(steps)} writes)")
        for step in reversed(steps):
            try:
                step()
            except Exception as e:
                logger.error(f"Rollback step failed: {e}")
