import numpy as np
import pytest

from primforest.index_min_pq import (
    DuplicateIndexError,
    HeapInvariantError,
    IndexMinPQ,
    InvalidIndexError,
    MissingIndexError,
    PriorityQueueError,
    UnderflowError,
)


def _fill(keyvals, capacity: int = 100) -> IndexMinPQ:
    impq = IndexMinPQ(capacity)
    for key, idx in keyvals:
        impq.push(key, idx)
        assert impq.contains(idx)
    return impq


def test_push_pop_size():
    impq = _fill([(2.0, 20), (4.0, 40), (6.0, 60), (8.0, 80)])
    assert impq.size() == 4

    for expected_size in (3, 2, 1, 0):
        impq.pop()
        assert impq.size() == expected_size
        assert len(impq) == expected_size

    assert not impq


@pytest.mark.parametrize(
    "keyvals,first,second,changed",
    (
        # increasing keys, increasing indices
        ([(2.0, 20), (4.0, 40), (6.0, 60), (8.0, 80)], 20, 40, 80),
        # decreasing keys, decreasing indices
        ([(8.0, 80), (6.0, 60), (4.0, 40), (2.0, 20)], 20, 40, 80),
        # decreasing keys, increasing indices
        ([(8.0, 20), (6.0, 40), (4.0, 60), (2.0, 80)], 80, 60, 20),
        # increasing keys, decreasing indices
        ([(2.0, 80), (4.0, 60), (6.0, 40), (8.0, 20)], 80, 60, 20),
        # random order
        ([(2.2, 99), (51.0, 54), (42.5, 53), (74.32, 93)], 99, 53, 93),
    ),
)
def test_simple_scenarios(keyvals, first: int, second: int, changed: int):
    impq = _fill(keyvals)

    assert impq.top() == first
    impq.pop()
    assert not impq.contains(first)
    assert impq.top() == second

    impq.change_key(1.0, changed)
    assert impq.top() == changed
    impq.check_invariants()


def test_change_key_sequence():
    impq = _fill([(5.0, 99), (25.0, 77), (50.0, 55), (75.0, 33)])
    assert impq.contains(33)
    assert impq.top() == 99

    steps = (
        (1.0, 33, 33),
        (2.0, 55, 33),
        (90.0, 33, 55),
        (95.0, 55, 99),
        (97.0, 99, 77),
        (99.0, 77, 33),
    )
    for key, idx, expected_top in steps:
        impq.change_key(key, idx)
        assert impq.top() == expected_top
        assert impq.key_of(idx) == key
        impq.check_invariants()


def test_char_keys():
    impq = _fill([("B", 99), ("C", 54), ("D", 53), ("E", 93)])

    assert impq.top() == 99
    impq.pop()
    assert 99 not in impq
    assert impq.top() == 54

    impq.change_key("A", 93)
    assert impq.top() == 93
    assert impq.top_key() == "A"


def test_sorted_extraction():
    impq = _fill([(8.0, 20), (6.0, 40), (4.0, 60), (2.0, 80)])
    popped = [impq.pop() for _ in range(4)]
    assert popped == [80, 60, 40, 20]


def test_contains_lifecycle():
    impq = IndexMinPQ(10)
    assert not impq.contains(7)
    impq.push(3.0, 7)
    assert impq.contains(7)
    assert impq.pop() == 7
    assert not impq.contains(7)

    # NOTE: an index can come back after being popped.
    impq.push(1.0, 7)
    assert impq.top() == 7


def test_push_exceptions():
    impq = _fill([("B", 0), ("C", 1), ("D", 2)], capacity=4)

    with pytest.raises(DuplicateIndexError):
        impq.push("H", 2)

    impq.push("B", 3)

    with pytest.raises(InvalidIndexError):
        impq.push("F", 4)

    with pytest.raises(InvalidIndexError):
        impq.push("F", -1)

    assert impq.size() == 4


@pytest.mark.parametrize("method", ("pop", "top", "top_key"))
def test_underflow(method: str):
    impq = IndexMinPQ(4)
    with pytest.raises(UnderflowError):
        getattr(impq, method)()


def test_change_key_exceptions():
    impq = _fill([("B", 0), ("C", 1), ("D", 3)], capacity=4)

    with pytest.raises(MissingIndexError):
        impq.change_key("H", 2)

    impq.change_key("A", 3)
    assert impq.top() == 3

    with pytest.raises(InvalidIndexError):
        impq.change_key("F", 4)

    with pytest.raises(InvalidIndexError):
        impq.contains(4)

    with pytest.raises(MissingIndexError):
        impq.key_of(2)


def test_error_hierarchy():
    assert issubclass(InvalidIndexError, IndexError)
    assert issubclass(UnderflowError, IndexError)
    assert issubclass(DuplicateIndexError, KeyError)
    assert issubclass(MissingIndexError, KeyError)
    for error in (InvalidIndexError, UnderflowError, DuplicateIndexError, MissingIndexError, HeapInvariantError):
        assert issubclass(error, PriorityQueueError)


def test_zero_capacity():
    impq = IndexMinPQ(0)
    assert impq.size() == 0
    with pytest.raises(InvalidIndexError):
        impq.push(1.0, 0)
    with pytest.raises(UnderflowError):
        impq.pop()


def test_check_invariants_detects_corruption():
    impq = _fill([(1.0, 0), (2.0, 1), (3.0, 2)], capacity=3)
    impq.check_invariants()

    # Break heap order behind the queue's back.
    impq._keys[impq._heap_to_idx[1]] = 10.0
    with pytest.raises(HeapInvariantError, match="Heap order error"):
        impq.check_invariants()


def test_check_invariants_detects_position_mismatch():
    impq = _fill([(1.0, 0), (2.0, 1)], capacity=3)
    impq._idx_to_heap[1] = 1
    with pytest.raises(HeapInvariantError, match="Position map mismatch"):
        impq.check_invariants()


@pytest.mark.parametrize("seed", (0, 1, 17, 182, 1892))
def test_random_operations_keep_invariants(seed: int):
    rng = np.random.RandomState(seed)
    capacity = 64
    impq = IndexMinPQ(capacity)
    model = {}

    for _ in range(2000):
        op = rng.randint(3)
        idx = int(rng.randint(capacity))
        key = float(rng.randint(50))

        if op == 0 and idx not in model:
            impq.push(key, idx)
            model[idx] = key
        elif op == 1 and idx in model:
            impq.change_key(key, idx)
            model[idx] = key
        elif op == 2 and model:
            min_key = min(model.values())
            assert impq.top_key() == min_key
            popped = impq.pop()
            assert model.pop(popped) == min_key

        impq.check_invariants()
        assert impq.size() == len(model)
        for i in range(capacity):
            assert impq.contains(i) == (i in model)


@pytest.mark.parametrize("seed", (3, 42, 2024))
def test_heapsort_random_keys(seed: int):
    rng = np.random.RandomState(seed)
    n = 200
    keys = rng.permutation(n).astype(float)
    impq = IndexMinPQ(n)

    for idx in rng.permutation(n):
        impq.push(keys[idx], int(idx))

    popped_keys = []
    while impq:
        popped_keys.append(keys[impq.pop()])

    assert popped_keys == sorted(keys.tolist())


def test_error_messages_are_not_quoted():
    impq = _fill([(1.0, 2)], capacity=4)

    with pytest.raises(DuplicateIndexError) as excinfo:
        impq.push(2.0, 2)
    assert str(excinfo.value) == "Index 2 is already in the priority queue."

    with pytest.raises(MissingIndexError) as excinfo:
        impq.change_key(2.0, 3)
    assert str(excinfo.value) == "Index 3 is not in the priority queue."

    with pytest.raises(UnderflowError) as excinfo:
        IndexMinPQ(1).top()
    assert str(excinfo.value) == "Priority queue underflow."
