"""
Open documents.

A Document is one immutable snapshot: the text, the tree parsed from it,
and everything derived from that tree. Edits never touch a Document in
place; they build a new one and swap it into the store under the write
lock, so a reader holding the old snapshot always sees a consistent set.

MIT/Apache 2.0 License - Froggy LSP authors 2025
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from .errors import ParseFailure
from .labels import LabelIndex, LabelPolicy
from .positions import PositionMapper
from .syntax import Tree, parse

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Document:
    uri: str
    text: str
    version: int
    tree: Tree
    labels: LabelIndex
    positions: PositionMapper
    policy: LabelPolicy = LabelPolicy.LAST_WINS

    @property
    def source(self) -> bytes:
        """The text as UTF-8 bytes, the coordinate space of the tree."""
        return self.positions.source

    @classmethod
    def create(cls, uri: str, text: str, version: int,
               policy: LabelPolicy = LabelPolicy.LAST_WINS,
               previous_tree: Optional[Tree] = None) -> 'Document':
        """Parse text and build every derived structure. Raises ParseFailure."""
        tree = parse(text, previous_tree)
        return cls(
            uri=uri,
            text=text,
            version=version,
            tree=tree,
            labels=LabelIndex.build(tree, text, policy),
            positions=PositionMapper(text),
            policy=policy,
        )

    def update(self, text: str, version: int) -> 'Document':
        """A new snapshot for the new text; this one is left untouched."""
        return Document.create(self.uri, text, version, self.policy, previous_tree=self.tree)


def open_document(uri: str, text: str, version: int,
                  policy: LabelPolicy = LabelPolicy.LAST_WINS) -> Document:
    return Document.create(uri, text, version, policy)


def apply_change(doc: Document, text: str, version: int) -> Document:
    """Replace the whole text. If it can't be parsed, keep serving the old snapshot."""
    try:
        return doc.update(text, version)
    except ParseFailure as exc:
        logger.warning('Keeping %s v%d, v%d failed to parse: %s', doc.uri, doc.version, version, exc)
        return doc


class ReadWriteLock:
    """Any number of readers or a single writer. A waiting writer holds off new readers."""

    def __init__(self):
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._condition:
            while self._writing or self._writers_waiting:
                self._condition.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._condition:
                self._readers -= 1
                if self._readers == 0:
                    self._condition.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._condition:
            self._writers_waiting += 1
            try:
                while self._writing or self._readers:
                    self._condition.wait()
            finally:
                self._writers_waiting -= 1
            self._writing = True
        try:
            yield
        finally:
            with self._condition:
                self._writing = False
                self._condition.notify_all()


class DocumentStore:
    """All open documents, keyed by URI."""

    def __init__(self, policy: LabelPolicy = LabelPolicy.LAST_WINS):
        self.policy = policy
        self._documents: Dict[str, Document] = {}
        self._lock = ReadWriteLock()

    def open(self, uri: str, text: str, version: int) -> Document:
        with self._lock.write():
            doc = open_document(uri, text, version, self.policy)
            self._documents[uri] = doc
        logger.info('Opened %s v%d (%d bytes)', uri, version, len(doc.source))
        return doc

    def apply_change(self, uri: str, text: str, version: int) -> Optional[Document]:
        """Swap in a new snapshot for uri. None if the document isn't open."""
        with self._lock.write():
            current = self._documents.get(uri)
            if current is None:
                logger.warning('Change for unopened document %s ignored', uri)
                return None
            doc = apply_change(current, text, version)
            self._documents[uri] = doc
        logger.info('Changed %s v%d', uri, doc.version)
        return doc

    def close(self, uri: str) -> bool:
        with self._lock.write():
            removed = self._documents.pop(uri, None) is not None
        if removed:
            logger.info('Closed %s', uri)
        return removed

    def get(self, uri: str) -> Optional[Document]:
        with self._lock.read():
            return self._documents.get(uri)

    @contextmanager
    def read(self, uri: str) -> Iterator[Optional[Document]]:
        """Hold the shared lock for the length of one query."""
        with self._lock.read():
            yield self._documents.get(uri)

    def uris(self) -> List[str]:
        with self._lock.read():
            return list(self._documents)

    def __contains__(self, uri: str) -> bool:
        with self._lock.read():
            return uri in self._documents

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._documents)
