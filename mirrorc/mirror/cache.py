"""
Descriptor cache.

Memoizes type metadata by identity with a compute-once discipline: the first
caller for an identity computes, concurrent callers for the same identity
block until it finishes, and everybody observes the same terminal result.
Failures are terminal too. A type's shape cannot change while the process
runs, so a failed discovery is re-raised to every later caller instead of
being retried.

Entries are never evicted.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator, Optional

from mirrorc.internals.errors import raise_internal_error
from mirrorc.mirror.model import TypeMetadata

logger = logging.getLogger(__name__)


class EntryState(Enum):
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


@dataclass
class CacheEntry:
    identity: str
    state: EntryState = EntryState.PENDING
    metadata: Optional[TypeMetadata] = None
    error: Optional[Exception] = None
    owner: Optional[int] = None  # thread ident of the computing caller
    done: threading.Event = field(default_factory=threading.Event, repr=False)

    def result(self) -> TypeMetadata:
        if self.state is EntryState.FAILED:
            assert self.error is not None
            # Same object for every caller; drop the frames earlier raises left on it
            raise self.error.with_traceback(None)
        assert self.metadata is not None
        return self.metadata


class DescriptorCache:
    def __init__(self, compute: Callable[[str], TypeMetadata]) -> None:
        """
        Args:
            compute: Produces the descriptor for an identity (normally
                ReflectiveBridge.introspect). Called at most once per identity.
        """
        self._compute = compute
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get_or_compute(self, identity: str) -> TypeMetadata:
        while True:
            with self._lock:
                entry = self._entries.get(identity)
                if entry is None:
                    entry = CacheEntry(identity, owner=threading.get_ident())
                    self._entries[identity] = entry
                    mine = True
                else:
                    mine = False

            if mine:
                return self._fill(entry)

            if entry.state is EntryState.PENDING:
                if entry.owner == threading.get_ident():
                    raise_internal_error("CE0002", identity=identity)
                entry.done.wait()

            if entry.state is not EntryState.PENDING:
                return entry.result()
            # The computing caller was interrupted and withdrew the entry; try again.

    def _fill(self, entry: CacheEntry) -> TypeMetadata:
        try:
            metadata = self._compute(entry.identity)
        except Exception as exc:
            entry.error = exc
            entry.state = EntryState.FAILED
            logger.debug("descriptor for %s failed permanently: %s", entry.identity, exc)
            raise
        else:
            entry.metadata = metadata
            entry.state = EntryState.READY
            logger.debug("descriptor for %s ready", entry.identity)
            return metadata
        finally:
            if entry.state is EntryState.PENDING:
                with self._lock:
                    if self._entries.get(entry.identity) is entry:
                        del self._entries[entry.identity]
            entry.owner = None
            entry.done.set()

    def peek(self, identity: str) -> Optional[CacheEntry]:
        with self._lock:
            return self._entries.get(identity)

    def identities(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._entries))

    def __contains__(self, identity: str) -> bool:
        with self._lock:
            return identity in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
