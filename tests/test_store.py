"""Unit tests for the transactional store."""
import pytest

from txkv import TransactionalStore


@pytest.fixture
def store():
    """Fresh empty store."""
    s = TransactionalStore[str, str]()
    yield s
    s.clear()


def test_set_and_get(store):
    """Test that a stored value is returned until overwritten."""
    store.set("foo", "123")
    assert store.get("foo") == "123"
    assert store["foo"] == "123"

    # Overwrite returns previous value
    assert store.set("foo", "456") == "123"
    assert store.get("foo") == "456"


def test_get_missing(store):
    """Test lookups of keys that were never set."""
    assert store.get("foo") is None
    assert store.get("foo", "fallback") == "fallback"
    with pytest.raises(KeyError):
        store["foo"]


def test_delete(store):
    """Test removal of an existing key."""
    store.set("foo", "123")
    assert store.delete("foo") == "123"
    assert store.get("foo") is None


def test_delete_missing_is_noop(store):
    """Test that deleting an absent key raises nothing."""
    assert store.delete("foo") is None
    assert store.get("foo") is None
    assert store.is_empty()


def test_count(store):
    """Test counting the keys mapped to a value."""
    store.set("foo", "123")
    store.set("bar", "456")
    store.set("baz", "123")
    assert store.count("123") == 2
    assert store.count("456") == 1
    assert store.count("789") == 0


def test_map_queries(store):
    """Test size / emptiness / containment helpers."""
    assert store.is_empty()
    assert store.size == 0
    store["foo"] = "123"
    assert not store.is_empty()
    assert len(store) == store.size == 1
    assert "foo" in store
    assert store.contains_key("foo")
    assert not store.contains_key("bar")
    assert store.contains_value("123")
    assert not store.contains_value("456")
    assert dict(store.items()) == {"foo": "123"}


def test_commit(store):
    """Test that committed changes survive and cannot be rolled back."""
    store.set("foo", "123")
    store.begin()
    store.set("foo", "456")
    assert store.commit() is True
    assert store.get("foo") == "456"
    assert store.rollback() is False
    assert store.get("foo") == "456"
    assert store.depth == 0


def test_rollback(store):
    """Test that rollback restores values changed inside the transaction."""
    store.set("foo", "123")
    store.set("bar", "abc")
    store.begin()
    store.set("foo", "456")
    assert store.get("foo") == "456"
    store.set("bar", "def")
    assert store.get("bar") == "def"
    assert store.rollback() is True
    assert store.get("foo") == "123"
    assert store.get("bar") == "abc"
    assert store.commit() is False


def test_rollback_restores_added_and_deleted_keys(store):
    """Test that keys added are removed and keys deleted reappear."""
    store.set("kept", "1")
    store.begin()
    store.delete("kept")
    store.set("added", "2")
    assert store.get("kept") is None
    store.rollback()
    assert store.get("kept") == "1"
    assert "added" not in store


def test_no_transaction(store):
    """Test commit/rollback at depth 0 leave state untouched."""
    store.set("foo", "123")
    assert store.commit() is False
    assert store.rollback() is False
    assert dict(store) == {"foo": "123"}
    assert store.depth == 0


def test_begin_isolates_layers(store):
    """Test that writes inside a transaction do not leak into the checkpoint."""
    store.set("foo", "123")
    store.begin()
    store.set("foo", "456")
    store.begin()
    store.delete("foo")
    store.rollback()
    assert store.get("foo") == "456"
    store.rollback()
    assert store.get("foo") == "123"


def test_nested_transactions(store):
    """Test independently reversible nested transactions."""
    store.set("foo", "123")
    store.begin()
    store.set("bar", "456")
    store.set("foo", "456")
    store.begin()
    assert store.depth == 2
    assert store.count("456") == 2
    assert store.get("foo") == "456"
    store.set("foo", "789")
    assert store.get("foo") == "789"
    assert store.rollback() is True
    assert store.get("foo") == "456"
    assert store.rollback() is True
    assert store.get("foo") == "123"
    assert store.get("bar") is None


def test_nested_rollback_to_absent(store):
    """Test that unwinding every level leaves a key absent again."""
    store.begin()
    store.set("a", "1")
    store.begin()
    store.set("a", "2")
    store.rollback()
    assert store.get("a") == "1"
    store.rollback()
    assert store.get("a") is None


def test_nested_commit_absorbed_by_parent(store):
    """Test that a committed child is undone by rolling back its parent."""
    store.begin()
    store.set("a", "1")
    store.begin()
    store.set("a", "2")
    assert store.commit() is True
    assert store.depth == 1
    assert store.get("a") == "2"
    # the committed child is no longer a separate undo step
    assert store.rollback() is True
    assert store.get("a") is None
    assert store.depth == 0


def test_clear_discards_transactions(store):
    """Test that clear resets to a single empty base layer."""
    store.set("foo", "123")
    store.begin()
    store.begin()
    store.clear()
    assert store.depth == 0
    assert store.is_empty()
    assert store.commit() is False


def test_transaction_context_commits(store):
    """Test the context manager commits on success."""
    with store.transaction() as tx:
        tx.set("foo", "123")
        assert store.depth == 1
    assert store.depth == 0
    assert store.get("foo") == "123"


def test_transaction_context_rolls_back_on_error(store):
    """Test the context manager rolls back and re-raises on failure."""
    store.set("foo", "123")
    with pytest.raises(RuntimeError):
        with store.transaction():
            store.set("foo", "456")
            raise RuntimeError("boom")
    assert store.depth == 0
    assert store.get("foo") == "123"


def test_update_writes_top_layer(store):
    """Test bulk update only touches the open transaction."""
    store.begin()
    store.update({"a": "1", "b": "1"})
    assert store.count("1") == 2
    store.rollback()
    assert store.is_empty()


@pytest.mark.parametrize("close", ["rollback", "commit", "clear"])
def test_transaction_context_closed_inside_block(store, close):
    """Test that ending the block's transaction early leaves outer ones alone."""
    store.begin()
    store.set("a", "outer")
    with pytest.raises(RuntimeError):
        with store.transaction():
            store.set("a", "inner")
            getattr(store, close)()
    if close == "clear":
        assert store.depth == 0
        assert store.is_empty()
    else:
        # caller's transaction is still open and can be rolled back
        assert store.depth == 1
        assert store.rollback() is True
        assert store.get("a") is None


def test_transaction_context_nested(store):
    """Test nested context blocks unwind one level each."""
    with store.transaction():
        store.set("a", "1")
        with pytest.raises(KeyError):
            with store.transaction():
                store.set("a", "2")
                store["missing"]
        assert store.depth == 1
        assert store.get("a") == "1"
    assert store.depth == 0
    assert store.get("a") == "1"


def test_repr(store):
    """Test repr reports depth and visible size."""
    store.set("a", "1")
    store.begin()
    assert repr(store) == "TransactionalStore<depth=1 size=1>"
