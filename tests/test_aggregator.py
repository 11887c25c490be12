"""Tests for line item aggregation"""

from app.reconciliation.aggregator import aggregate
from app.reconciliation.normalizer import compute_total
from app.schemas.order import LineItem


def item(id, price, quantity, name=None):
    return LineItem(id=id, name=name or f"Item {id}", price=price, quantity=quantity)


def test_disjoint_lists_are_concatenated():
    a = [item("a", 10, 1), item("b", 4, 2)]
    b = [item("c", 7.5, 2)]

    merged = aggregate([a, b])

    assert len(merged) == len(a) + len(b)
    assert compute_total(merged) == compute_total(a) + compute_total(b)
    assert [it.id for it in merged] == ["a", "b", "c"]


def test_shared_id_sums_quantity_and_keeps_first_price():
    merged = aggregate([[item("x", 10, 1)], [item("x", 99, 2)]])

    assert len(merged) == 1
    assert merged[0].id == "x"
    assert merged[0].price == 10
    assert merged[0].quantity == 3


def test_first_seen_name_is_kept():
    merged = aggregate([[item("x", 1, 1, name="Kebab")], [item("x", 1, 1, name="Döner")]])
    assert merged[0].name == "Kebab"


def test_empty_ids_are_dropped():
    merged = aggregate([[item("", 5, 1), item("a", 1, 1)], [item("", 3, 3)]])
    assert [it.id for it in merged] == ["a"]


def test_duplicates_within_one_list_are_combined():
    merged = aggregate([[item("a", 2, 1), item("b", 1, 1), item("a", 5, 4)]])
    assert [(it.id, it.price, it.quantity) for it in merged] == [("a", 2, 5), ("b", 1, 1)]


def test_order_follows_first_appearance():
    merged = aggregate([[item("b", 1, 1)], [item("a", 1, 1), item("b", 1, 1)], [item("c", 1, 1)]])
    assert [it.id for it in merged] == ["b", "a", "c"]


def test_inputs_are_not_mutated():
    first = [item("x", 10, 1)]
    aggregate([first, [item("x", 10, 5)]])
    assert first[0].quantity == 1


def test_empty_input():
    assert aggregate([]) == []
    assert aggregate([[], []]) == []
    assert compute_total(aggregate([[]])) == 0
