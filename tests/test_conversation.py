from whoami.models.session import Turn
from whoami.services.conversation import SessionStore


def test_new_session_has_empty_history():
    store = SessionStore()

    session = store.get_or_create("s-1")

    assert session.id == "s-1"
    assert session.turns == []
    assert store.history("s-1") == []
    assert "s-1" in store


def test_get_or_create_returns_the_same_session():
    store = SessionStore()

    first = store.get_or_create("s-1")
    second = store.get_or_create("s-1")

    assert first is second
    assert len(store) == 1


def test_append_preserves_insertion_order():
    store = SessionStore()
    store.get_or_create("s-1")

    store.append("s-1", Turn(role="human", content="hi"))
    store.append("s-1", Turn(role="assistant", content="hello"))

    assert [turn.role for turn in store.history("s-1")] == ["human", "assistant"]


def test_append_to_unknown_session_is_a_noop():
    store = SessionStore()

    store.append("missing", Turn(role="human", content="hi"))

    assert store.history("missing") == []
    assert "missing" not in store


def test_history_returns_a_copy():
    store = SessionStore()
    store.get_or_create("s-1")
    store.append("s-1", Turn(role="human", content="hi"))

    history = store.history("s-1")
    history.clear()

    assert len(store.history("s-1")) == 1


def test_delete_is_idempotent():
    store = SessionStore()
    store.get_or_create("s-1")

    assert store.delete("s-1") is True
    assert store.delete("s-1") is False


def test_recreated_session_does_not_resurrect_turns():
    store = SessionStore()
    store.get_or_create("s-1")
    store.append("s-1", Turn(role="human", content="old"))

    store.delete("s-1")
    session = store.get_or_create("s-1")

    assert session.turns == []
    assert store.history("s-1") == []


def test_max_sessions_evicts_oldest_session():
    store = SessionStore(max_sessions=2)

    store.get_or_create("a")
    store.get_or_create("b")
    store.get_or_create("c")

    assert "a" not in store
    assert "b" in store
    assert "c" in store


def test_generate_id_is_unique():
    store = SessionStore()

    assert store.generate_id() != store.generate_id()
