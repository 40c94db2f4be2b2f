"""Tests for the variable cache."""

from concurrent.futures import ThreadPoolExecutor

from envbind import Var, VarCache


class First:
    pass


class Second:
    pass


def test_get_missing():
    assert VarCache().get(First) is None


def test_first_writer_wins():
    cache = VarCache()
    stored = cache.put(First, [Var(name="A", type=int)])
    again = cache.put(First, [Var(name="B", type=int)])

    assert [v.name for v in stored] == ["A"]
    assert [v.name for v in again] == ["A"]
    assert [v.name for v in cache.get(First)] == ["A"]
    assert First in cache
    assert Second not in cache


def test_returned_lists_are_copies():
    cache = VarCache()
    cache.put(First, [Var(name="A", type=int)])
    cache.get(First).clear()
    assert len(cache.get(First)) == 1


def test_clear():
    cache = VarCache()
    cache.put(First, [])
    cache.put(Second, [])
    assert len(cache) == 2
    cache.clear()
    assert len(cache) == 0


def test_concurrent_population():
    cache = VarCache()

    def populate(i):
        return cache.put(First, [Var(name=f"V{i}", type=int)])[0].name

    with ThreadPoolExecutor(max_workers=8) as executor:
        names = set(executor.map(populate, range(64)))

    assert len(names) == 1
    assert [v.name for v in cache.get(First)] == [names.pop()]


def test_tuple_keys_are_independent():
    cache = VarCache()
    cache.put((First, ""), [Var(name="PORT", type=int)])
    cache.put((First, "APP_"), [Var(name="APP_PORT", type=int)])

    assert [v.name for v in cache.get((First, ""))] == ["PORT"]
    assert [v.name for v in cache.get((First, "APP_"))] == ["APP_PORT"]
    assert cache.get(First) is None
