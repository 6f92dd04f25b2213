import threading

import pytest

from froggy_lsp.document import Document, DocumentStore, ReadWriteLock, apply_change, open_document
from froggy_lsp.errors import ParseFailure
from froggy_lsp.labels import LabelPolicy
from froggy_lsp.positions import ByteRange

URI = 'file:///pond/main.frog'
UNPARSEABLE = 'PLOP "\ud800"'


class TestDocument:
    def test_create_builds_every_derived_structure(self):
        doc = open_document(URI, 'LILY a\nHOP a', 3)
        assert doc.version == 3
        assert doc.text == 'LILY a\nHOP a'
        assert doc.source == b'LILY a\nHOP a'
        assert doc.tree.root_node.type == 'program'
        assert doc.labels.definition('a') == ByteRange(0, 6)
        assert doc.positions.line_count == 2

    def test_update_returns_new_snapshot(self):
        first = open_document(URI, 'LILY a', 1)
        second = first.update('LILY b', 2)
        assert second is not first
        assert first.text == 'LILY a'
        assert first.labels.definitions == {'a': ByteRange(0, 6)}
        assert second.labels.definitions == {'b': ByteRange(0, 6)}
        assert second.uri == first.uri

    def test_snapshot_is_immutable(self):
        doc = open_document(URI, 'RIBBIT', 1)
        with pytest.raises(AttributeError):
            doc.text = 'CROAK'

    def test_same_text_twice_gives_same_index(self):
        doc = open_document(URI, 'LILY a\nHOP a\nLEAP a', 1)
        again = apply_change(apply_change(doc, doc.text, 2), doc.text, 3)
        assert again.labels == doc.labels
        assert again.version == 3

    def test_policy_carries_across_updates(self):
        doc = open_document(URI, 'LILY a', 1, LabelPolicy.FIRST_WINS)
        updated = doc.update('LILY a\nLILY a', 2)
        assert updated.labels.definition('a') == ByteRange(0, 6)

    def test_parse_failure_keeps_previous_snapshot(self):
        doc = open_document(URI, 'RIBBIT', 1)
        assert apply_change(doc, UNPARSEABLE, 2) is doc

    def test_create_raises_on_parse_failure(self):
        with pytest.raises(ParseFailure):
            Document.create(URI, UNPARSEABLE, 1)


class TestDocumentStore:
    def test_open_get_close(self):
        store = DocumentStore()
        doc = store.open(URI, 'RIBBIT', 1)
        assert store.get(URI) is doc
        assert URI in store
        assert store.uris() == [URI]
        assert len(store) == 1
        assert store.close(URI)
        assert store.get(URI) is None
        assert not store.close(URI)

    def test_apply_change_replaces_snapshot(self):
        store = DocumentStore()
        old = store.open(URI, 'LILY a', 1)
        new = store.apply_change(URI, 'LILY b', 2)
        assert store.get(URI) is new
        assert old.labels.definitions == {'a': ByteRange(0, 6)}

    def test_change_for_unknown_document(self):
        assert DocumentStore().apply_change(URI, 'RIBBIT', 1) is None

    def test_failed_change_serves_last_good_snapshot(self):
        store = DocumentStore()
        good = store.open(URI, 'RIBBIT', 1)
        assert store.apply_change(URI, UNPARSEABLE, 2) is good
        assert store.get(URI).version == 1

    def test_read_yields_snapshot(self):
        store = DocumentStore()
        store.open(URI, 'RIBBIT', 1)
        with store.read(URI) as doc:
            assert doc.text == 'RIBBIT'
        with store.read('file:///elsewhere.frog') as doc:
            assert doc is None

    def test_store_policy_applies_to_new_documents(self):
        store = DocumentStore(LabelPolicy.FIRST_WINS)
        doc = store.open(URI, 'LILY a\nLILY a', 1)
        assert doc.labels.definition('a') == ByteRange(0, 6)


class TestReadWriteLock:
    def test_readers_share(self):
        lock = ReadWriteLock()
        entered = threading.Event()

        def reader():
            with lock.read():
                entered.set()

        with lock.read():
            thread = threading.Thread(target=reader)
            thread.start()
            assert entered.wait(timeout=2)
        thread.join(timeout=2)

    def test_writer_waits_for_readers(self):
        lock = ReadWriteLock()
        written = threading.Event()

        def writer():
            with lock.write():
                written.set()

        with lock.read():
            thread = threading.Thread(target=writer)
            thread.start()
            assert not written.wait(timeout=0.1)
        assert written.wait(timeout=2)
        thread.join(timeout=2)

    def test_readers_wait_for_writer(self):
        lock = ReadWriteLock()
        read = threading.Event()

        def reader():
            with lock.read():
                read.set()

        with lock.write():
            thread = threading.Thread(target=reader)
            thread.start()
            assert not read.wait(timeout=0.1)
        assert read.wait(timeout=2)
        thread.join(timeout=2)
