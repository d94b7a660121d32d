"""Tests for the SkipList engine."""

import copy
import math
import random

import pytest

from skiplist_collections import (
    Comparator,
    EmptyContainerError,
    InvalidPositionError,
    NodeConstructionError,
    SkipList,
    config,
    level_report,
    sketch,
)


def _random_keys(n, seed, upper=None):
    rng = random.Random(seed)
    return [rng.randrange(upper or n * 10) for _ in range(n)]


class TestSkipListConstruction:
    """Construction and parameter validation."""

    def test_create_empty(self):
        """A new list is empty."""
        sl = SkipList()
        assert len(sl) == 0
        assert sl.empty()
        assert list(sl) == []

    def test_defaults_from_config(self):
        """p and max_level default to the configured values."""
        sl = SkipList()
        assert sl.probability == config.default_probability
        assert sl.max_level == config.default_max_level

    def test_explicit_parameters(self):
        """p and max_level can be given explicitly."""
        sl = SkipList(p=0.25, max_level=4)
        assert sl.probability == 0.25
        assert sl.max_level == 4

    @pytest.mark.parametrize('p', [0, 1, -0.5, 1.5])
    def test_invalid_probability(self, p):
        """p outside (0, 1) is rejected."""
        with pytest.raises(ValueError):
            SkipList(p=p)

    def test_invalid_max_level(self):
        """max_level below 1 is rejected."""
        with pytest.raises(ValueError):
            SkipList(max_level=0)

    def test_bulk_construction_ignores_duplicates(self):
        """Later duplicates in the input are ignored."""
        sl = SkipList([5, 6, 7, 8, 1, 3, 1, 0, 9], seed=1)
        assert list(sl) == [0, 1, 3, 5, 6, 7, 8, 9]
        assert len(sl) == 8

    def test_bulk_construction_map_mode_first_wins(self):
        """In map mode the first value given for a key is kept."""
        sl = SkipList([(1, 'a'), (2, 'b'), (1, 'c')], values=True, seed=1)
        assert list(sl.items()) == [(1, 'a'), (2, 'b')]

    def test_bulk_construction_map_mode_from_mapping(self):
        """A mapping given in map mode contributes its items."""
        sl = SkipList({2: 'b', 1: 'a'}, values=True, seed=1)
        assert list(sl.items()) == [(1, 'a'), (2, 'b')]
        sl.extend({3: 'c'})
        assert sl.at(3) == 'c'


class TestSkipListInsert:
    """Insertion in its three cases."""

    def test_insert_into_empty(self):
        """First insert builds a full-height tower."""
        sl = SkipList(max_level=6, seed=3)
        position, inserted = sl.insert(4)
        assert inserted
        assert position.key == 4
        assert sl.height(4) == 6
        assert sl.front() == sl.back() == 4
        sl.check_invariants()

    def test_insert_duplicate_reports_false(self):
        """Inserting an existing key is a no-op reported by the flag."""
        sl = SkipList([1, 2, 3], seed=3)
        position, inserted = sl.insert(2)
        assert not inserted
        assert position.key == 2
        assert len(sl) == 3

    def test_insert_duplicate_of_minimum(self):
        """Duplicate of the head key is detected."""
        sl = SkipList([1, 2], seed=3)
        position, inserted = sl.insert(1)
        assert not inserted
        assert position == sl.begin()

    def test_insert_new_minimum_keeps_full_spine(self):
        """A new minimum takes over the full-height head tower."""
        sl = SkipList(max_level=8, seed=5)
        for k in [50, 40, 30, 20, 10]:
            sl.insert(k)
            assert sl.height(k) == 8
            sl.check_invariants()
        # previous minima were demoted to random heights
        assert all(1 <= sl.height(k) <= 8 for k in [20, 30, 40, 50])

    def test_descending_inserts_demote_old_minimum(self):
        """Repeated new minima leave a geometric height distribution."""
        sl = SkipList(range(500, 0, -1), max_level=10, seed=11)
        sl.check_invariants()
        report = level_report(sl)
        assert report.nodes_per_level[0] == 500
        assert 0 < report.nodes_per_level[1] < 500
        assert report.nodes_per_level[1] > report.nodes_per_level[3]

    def test_back_tracks_maximum(self):
        """back() is 9 after each of 9, 7, 6, 1, 3."""
        sl = SkipList(seed=2)
        backs = []
        for k in [9, 7, 6, 1, 3]:
            sl.insert(k)
            backs.append(sl.back())
        assert backs == [9, 9, 9, 9, 9]

    def test_back_with_duplicates(self):
        """Final back() and size after a sequence with a duplicate."""
        sl = SkipList(seed=2)
        for k in [5, 6, 7, 8, 1, 3, 1, 0, 9]:
            sl.insert(k)
        assert sl.back() == 9
        assert sl.front() == 0
        assert len(sl) == 8

    def test_insert_none_rejected(self):
        """None can never become a key."""
        sl = SkipList([1])
        with pytest.raises(NodeConstructionError):
            sl.insert(None)
        with pytest.raises(NodeConstructionError):
            SkipList().insert(None)

    def test_insert_value_in_set_mode_rejected(self):
        """A keys-only list refuses values."""
        sl = SkipList()
        with pytest.raises(TypeError):
            sl.insert(1, 'value')
        assert len(sl) == 0

    def test_insert_value_in_set_mode_rejected_for_existing_key(self):
        """The keys-only check applies whether or not the key is present."""
        sl = SkipList([1, 2])
        with pytest.raises(TypeError):
            sl.insert(1, 'value')
        with pytest.raises(TypeError):
            sl.insert(2, 'value')
        assert list(sl) == [1, 2]

    def test_iteration_sorted_and_unique(self):
        """Iteration is strictly ascending and matches len()."""
        keys = _random_keys(1000, seed=7, upper=300)
        sl = SkipList(keys, seed=7)
        result = list(sl)
        assert result == sorted(set(keys))
        assert len(result) == len(sl)
        sl.check_invariants()

    def test_reverse_iteration(self):
        """reversed() walks from the maximum down."""
        sl = SkipList([3, 1, 2], seed=4)
        assert list(reversed(sl)) == [3, 2, 1]

    def test_height_never_exceeds_max_level(self):
        """Towers are capped at max_level."""
        sl = SkipList(range(300), p=0.9, max_level=3, seed=8)
        assert max(sl.height(k) for k in sl) == 3
        sl.check_invariants()


class TestSkipListSearch:
    """exists/count/find/bounds."""

    def test_exists_and_count(self):
        """Membership reflects inserts and erases."""
        sl = SkipList([1, 3, 6, 7, 9], seed=9)
        assert sl.exists(6)
        assert 6 in sl
        assert sl.count(6) == 1
        assert not sl.exists(5)
        assert sl.count(5) == 0
        sl.erase(6)
        assert not sl.exists(6)

    def test_find(self):
        """find() returns the key's position or end()."""
        sl = SkipList([1, 3, 6, 7, 9], seed=9)
        assert sl.find(7).key == 7
        assert sl.find(1) == sl.begin()
        assert sl.find(4) == sl.end()
        assert sl.find(0) == sl.end()
        assert sl.find(10) == sl.end()

    def test_bounds_between_keys(self):
        """Probe 5 in {1,3,6,7,9}: both bounds land on 6."""
        sl = SkipList([1, 3, 6, 7, 9], seed=9)
        assert sl.lower_bound(5).key == 6
        assert sl.upper_bound(5).key == 6

    def test_bounds_on_key(self):
        """Probe 6 in {1,3,6,7,9}: lower at 6, upper at 7."""
        sl = SkipList([1, 3, 6, 7, 9], seed=9)
        assert sl.lower_bound(6).key == 6
        assert sl.upper_bound(6).key == 7

    def test_bounds_at_the_ends(self):
        """Bounds below the minimum and at/above the maximum."""
        sl = SkipList([1, 3, 6, 7, 9], seed=9)
        assert sl.lower_bound(0) == sl.begin()
        assert sl.upper_bound(1).key == 3
        assert sl.lower_bound(10) == sl.end()
        assert sl.upper_bound(9) == sl.end()

    def test_bounds_against_bisect(self):
        """Bounds agree with a sorted list for many probes."""
        import bisect
        keys = sorted(set(_random_keys(400, seed=12, upper=1000)))
        sl = SkipList(keys, seed=12)
        for probe in range(-5, 1006, 7):
            i = bisect.bisect_left(keys, probe)
            j = bisect.bisect_right(keys, probe)
            lb = sl.lower_bound(probe)
            ub = sl.upper_bound(probe)
            assert (lb.is_end if i == len(keys) else lb.key == keys[i])
            assert (ub.is_end if j == len(keys) else ub.key == keys[j])

    def test_empty_search(self):
        """Searches on an empty list return end()."""
        sl = SkipList()
        assert not sl.exists(1)
        assert sl.find(1) == sl.end()
        assert sl.lower_bound(1) == sl.end()
        assert sl.upper_bound(1) == sl.end()

    def test_front_back_empty_raise(self):
        """front()/back() signal the empty container."""
        sl = SkipList()
        with pytest.raises(EmptyContainerError):
            sl.front()
        with pytest.raises(EmptyContainerError):
            sl.back()

    def test_empty_container_error_is_key_error(self):
        """EmptyContainerError can be caught as KeyError."""
        with pytest.raises(KeyError):
            SkipList().front()


class TestSkipListErase:
    """Erase by key and by position."""

    def test_erase_returns_count(self):
        """erase() returns 1 when removed, 0 when absent."""
        sl = SkipList([1, 2, 3], seed=1)
        assert sl.erase(2) == 1
        assert sl.erase(2) == 0
        assert list(sl) == [1, 3]

    def test_erase_absent_from_empty(self):
        """Erasing from an empty list is a no-op."""
        sl = SkipList()
        assert sl.erase(1) == 0

    def test_erase_sole_element_restores_empty_state(self):
        """Removing the last entry clears every level and last."""
        sl = SkipList(max_level=5, seed=1)
        sl.insert(42)
        assert sl.erase(42) == 1
        assert sl.empty()
        assert sketch(sl) == [[] for _ in range(5)]
        assert sl.begin() == sl.end()
        assert sl.rbegin() == sl.rend()
        sl.check_invariants()

    def test_erase_minimum_rebuilds_spine(self):
        """Erasing the minimum promotes its successor to full height."""
        sl = SkipList(range(50), max_level=7, seed=13)
        for expected in range(50):
            assert sl.front() == expected
            assert sl.height(expected) == 7
            sl.erase(expected)
            sl.check_invariants()
        assert sl.empty()

    def test_erase_maximum_updates_back(self):
        """Erasing the maximum moves back() to its predecessor."""
        sl = SkipList([1, 3, 6, 7, 9], seed=6)
        sl.erase(9)
        assert sl.back() == 7
        assert sl.end().prev().key == 7
        sl.check_invariants()

    def test_round_trip_any_order(self):
        """Insert K then erase K in shuffled order leaves an empty list."""
        keys = list(set(_random_keys(600, seed=21)))
        sl = SkipList(keys, seed=21)
        rng = random.Random(22)
        rng.shuffle(keys)
        for i, k in enumerate(keys):
            assert sl.erase(k) == 1
            if i % 50 == 0:
                sl.check_invariants()
        assert sl.empty()
        assert len(sl) == 0
        assert all(not level for level in sketch(sl))
        sl.check_invariants()

    def test_membership_after_random_workload(self):
        """exists(k) iff inserted and not erased, against a set model."""
        rng = random.Random(31)
        sl = SkipList(seed=31)
        model = set()
        for _ in range(3000):
            k = rng.randrange(200)
            if rng.random() < 0.6:
                _, inserted = sl.insert(k)
                assert inserted == (k not in model)
                model.add(k)
            else:
                assert sl.erase(k) == (1 if k in model else 0)
                model.discard(k)
        assert list(sl) == sorted(model)
        for k in range(200):
            assert sl.exists(k) == (k in model)
        sl.check_invariants()

    def test_erase_at_returns_following(self):
        """erase_at() returns the position after the removed entry."""
        sl = SkipList([1, 2, 3], seed=1)
        following = sl.erase_at(sl.find(2))
        assert following.key == 3
        assert sl.erase_at(following) == sl.end()
        assert list(sl) == [1]

    def test_erase_at_loop(self):
        """Erasing while walking removes every entry."""
        sl = SkipList(range(20), seed=1)
        position = sl.begin()
        while not position.is_end:
            position = sl.erase_at(position)
        assert sl.empty()

    def test_erase_at_end_rejected(self):
        """Sentinels cannot be erased."""
        sl = SkipList([1], seed=1)
        with pytest.raises(InvalidPositionError):
            sl.erase_at(sl.end())
        with pytest.raises(InvalidPositionError):
            sl.erase_at(sl.rend())

    def test_erase_at_foreign_position_rejected(self):
        """A position from another list is rejected."""
        a = SkipList([1, 2], seed=1)
        b = SkipList([1, 2], seed=1)
        with pytest.raises(InvalidPositionError):
            a.erase_at(b.find(1))

    def test_erase_at_stale_position_rejected(self):
        """A position whose entry was erased is rejected."""
        sl = SkipList([1, 2, 3], seed=1)
        position = sl.find(2)
        sl.erase(2)
        with pytest.raises(InvalidPositionError):
            sl.erase_at(position)


class TestSkipListMapMode:
    """Value-carrying entries."""

    def test_insert_does_not_overwrite(self):
        """A second insert leaves the stored value untouched."""
        sl = SkipList(values=True)
        _, inserted = sl.insert(1, 'a')
        assert inserted
        position, inserted = sl.insert(1, 'b')
        assert not inserted
        assert position.value == 'a'
        assert sl.at(1) == 'a'

    def test_at_missing_raises(self):
        """at() signals a missing key."""
        sl = SkipList(values=True)
        with pytest.raises(KeyError):
            sl.at('missing')

    def test_upsert_inserts_default(self):
        """upsert() inserts the default and returns an assignable position."""
        sl = SkipList(values=True)
        position = sl.upsert('k', 0)
        assert position.value == 0
        position.value += 5
        assert sl.at('k') == 5
        assert sl.upsert('k', 100).value == 5

    def test_value_shared_by_tower(self):
        """A value updated at level 0 is seen from every tower node."""
        sl = SkipList(values=True, max_level=4, seed=2)
        sl.insert(1, 'a')
        sl.find(1).value = 'b'
        assert [node.value for node in sl._iter_level(3)] == ['b']


class TestSkipListOrdering:
    """Pluggable comparators."""

    def test_reverse_comparator(self):
        """Reverse ordering iterates from largest to smallest."""
        sl = SkipList([1, 5, 3], cmp=Comparator.reverse(), seed=1)
        assert list(sl) == [5, 3, 1]
        assert sl.front() == 5
        assert sl.lower_bound(4).key == 3

    def test_callable_comparator(self):
        """A three-way callable defines the order and key identity."""
        sl = SkipList(['ccc', 'a', 'bb', 'dd'], cmp=lambda a, b: len(a) - len(b), seed=1)
        assert list(sl) == ['a', 'bb', 'ccc']
        assert sl.exists('zz')

    def test_key_function(self):
        """Keys are ordered and matched by the extracted sort key."""
        sl = SkipList(['B', 'a', 'A', 'c'], key=str.lower, seed=1)
        assert list(sl) == ['a', 'B', 'c']
        assert sl.exists('b')
        assert sl.find('C').key == 'c'


class TestSkipListLifecycle:
    """clear, copy, equality."""

    def test_clear(self):
        """clear() empties the list and invalidates positions."""
        sl = SkipList(range(10), seed=1)
        position = sl.find(3)
        sl.clear()
        assert sl.empty()
        assert not position.is_valid
        with pytest.raises(InvalidPositionError):
            _ = position.key
        sl.check_invariants()
        sl.insert(1)
        assert list(sl) == [1]

    def test_copy_is_independent(self):
        """A copy has the same contents and shape but its own nodes."""
        sl = SkipList(range(30), seed=4)
        clone = sl.copy()
        assert list(clone) == list(sl)
        assert sketch(clone) == sketch(sl)
        assert clone.find(3) != sl.find(3)
        clone.erase(3)
        clone.insert(100)
        assert 3 in sl
        assert 100 not in sl
        clone.check_invariants()
        sl.check_invariants()

    def test_copy_module(self):
        """copy.copy() uses the structural copy."""
        sl = SkipList([3, 1, 2], seed=4)
        clone = copy.copy(sl)
        assert clone == sl
        assert clone is not sl

    def test_copy_entries_not_shared(self):
        """Reassigning a value in a copy leaves the source untouched."""
        sl = SkipList([(1, 'a')], values=True)
        clone = sl.copy()
        clone.find(1).value = 'b'
        assert sl.at(1) == 'a'

    def test_deepcopy_copies_values(self):
        """deepcopy() also copies mutable values."""
        sl = SkipList([(1, [1, 2])], values=True)
        clone = copy.deepcopy(sl)
        clone.at(1).append(3)
        assert sl.at(1) == [1, 2]
        clone.check_invariants()

    def test_copy_of_empty(self):
        """Copying an empty list yields an empty list."""
        clone = SkipList().copy()
        assert clone.empty()
        clone.check_invariants()

    def test_equality(self):
        """Lists with the same keys compare equal regardless of shape."""
        assert SkipList([1, 2, 3], seed=1) == SkipList([3, 2, 1], seed=2)
        assert SkipList([1, 2]) != SkipList([1, 2, 3])
        assert SkipList([(1, 'a')], values=True) != SkipList([(1, 'b')], values=True)

    def test_check_invariants_toggle(self):
        """With checking enabled every mutation re-validates."""
        original = config.check_invariants
        try:
            config.check_invariants = True
            sl = SkipList(seed=17)
            rng = random.Random(17)
            for _ in range(300):
                k = rng.randrange(60)
                if rng.random() < 0.5:
                    sl.insert(k)
                else:
                    sl.erase(k)
        finally:
            config.check_invariants = original


class TestSkipListScale:
    """Height behaviour at scale."""

    def test_height_logarithmic(self):
        """Tallest non-head tower stays O(log n) with p = 0.5."""
        n = 2000
        sl = SkipList(_random_keys(n, seed=41), p=0.5, max_level=64, seed=41)
        report = level_report(sl)
        assert report.max_height <= 64
        assert report.max_height <= 4 * math.ceil(math.log2(len(sl)))
        sl.check_invariants()

    def test_height_capped_at_default_max_level(self):
        """No tower exceeds the default cap of 10."""
        sl = SkipList(range(1500), p=0.5, max_level=10, seed=42)
        assert level_report(sl).max_height <= 10
        assert sl.height(0) == 10
