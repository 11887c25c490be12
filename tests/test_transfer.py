"""Tests for table transfer reconciliation"""

import pytest

from app.config import settings
from app.errors import InvalidRequestError, NotFoundError
from app.reconciliation.checkout import find_open_orders
from app.reconciliation.normalizer import normalize_order
from app.reconciliation.notes import transfer_tag
from app.services.order_service import OrderService
from app.store.base import StoreError


A = {"id": "a", "name": "Adana", "price": 10, "quantity": 1}
B = {"id": "b", "name": "Baklava", "price": 4, "quantity": 2}
C = {"id": "c", "name": "Cay", "price": 1.5, "quantity": 3}


async def load(store, order_id):
    return normalize_order(await store.get("orders", order_id))


def quantities(order):
    return {item.id: item.quantity for item in order.items}


@pytest.mark.asyncio
async def test_transfer_to_empty_table_creates_tab(store, make_order):
    """Two open tabs at the source become one new tab at the target"""
    first = await make_order("1", [A, B], order_note="Allergic to nuts")
    second = await make_order("1", [dict(A, quantity=2), C])

    result = await OrderService(store).transfer("1", "2")

    assert result.created is True
    assert result.closed_order_ids == [first, second]

    target = await load(store, result.target_order_id)
    assert target.table_id == "2"
    assert target.payment_status == "pending"
    assert target.status == "new"
    assert target.session_id == ""
    assert quantities(target) == {"a": 3, "b": 2, "c": 3}
    assert target.total_price == 10 * 3 + 4 * 2 + 1.5 * 3
    assert target.order_note == "Allergic to nuts | " + transfer_tag("1", "2")

    assert await find_open_orders(store, "1") == []
    assert [o.id for o in await find_open_orders(store, "2")] == [result.target_order_id]


@pytest.mark.asyncio
async def test_transfer_merges_into_existing_tab(store, make_order):
    """The target tab's own price wins for items both tables ordered"""
    source = await make_order("1", [dict(A, price=12), C], order_note="From the window")
    target_id = await make_order("2", [A], order_note="Birthday")

    result = await OrderService(store).transfer("1", "2")

    assert result.created is False
    assert result.target_order_id == target_id
    assert result.closed_order_ids == [source]

    target = await load(store, target_id)
    assert quantities(target) == {"a": 2, "c": 3}
    assert target.items[0].price == 10
    assert target.total_price == 10 * 2 + 1.5 * 3
    assert target.order_note == " | ".join(["Birthday", "From the window", transfer_tag("1", "2")])
    assert target.version == 2


@pytest.mark.asyncio
async def test_transferred_sources_are_closed_with_tag(store, make_order):
    first = await make_order("1", [A], order_note="Window")
    second = await make_order("1", [B])

    await OrderService(store).transfer("1", "2")

    tag = transfer_tag("1", "2")
    closed_first = await load(store, first)
    closed_second = await load(store, second)

    assert closed_first.payment_status == "paid"
    assert closed_first.order_note == f"{tag} | Window"
    assert closed_second.payment_status == "paid"
    assert closed_second.order_note == tag
    # Items stay on the closed order for the record
    assert quantities(closed_first) == {"a": 1}


@pytest.mark.asyncio
async def test_transfer_totals_are_conserved(store, make_order):
    await make_order("1", [A, B])
    await make_order("1", [C])
    await make_order("2", [dict(B, quantity=1), C])
    before = sum(o.total_price for o in await find_open_orders(store, "1"))
    before += sum(o.total_price for o in await find_open_orders(store, "2"))

    result = await OrderService(store).transfer("1", "2")

    target = await load(store, result.target_order_id)
    assert target.total_price == before


@pytest.mark.asyncio
async def test_failed_transfer_changes_nothing(store, make_order):
    """A failure mid-batch leaves both tables as they were"""
    first = await make_order("1", [A])
    second = await make_order("1", [B])
    target_id = await make_order("2", [C])
    before = {doc["id"]: doc for doc in await store.query("orders")}

    store.fail_at = 2
    with pytest.raises(StoreError):
        await OrderService(store).transfer("1", "2")

    after = {doc["id"]: doc for doc in await store.query("orders")}
    assert after == before
    assert (await load(store, first)).payment_status == "pending"
    assert (await load(store, second)).payment_status == "pending"
    assert quantities(await load(store, target_id)) == {"c": 3}


@pytest.mark.asyncio
async def test_failed_transfer_to_empty_table_creates_nothing(store, make_order):
    await make_order("1", [A])
    await make_order("1", [B])

    store.fail_at = 3
    with pytest.raises(StoreError):
        await OrderService(store).transfer("1", "2")

    assert await find_open_orders(store, "2") == []
    assert len(await find_open_orders(store, "1")) == 2


@pytest.mark.asyncio
async def test_transfer_to_same_table_is_rejected(store, make_order):
    await make_order("1", [A])

    with pytest.raises(InvalidRequestError):
        await OrderService(store).transfer("1", "1")

    assert len(await find_open_orders(store, "1")) == 1


@pytest.mark.asyncio
async def test_transfer_without_open_tabs(store, make_order):
    await make_order("1", [A], payment_status="paid")

    with pytest.raises(NotFoundError):
        await OrderService(store).transfer("1", "2")

    assert await store.query("orders") != []
    assert await find_open_orders(store, "2") == []


@pytest.mark.asyncio
async def test_transfer_is_blocked_by_concurrent_change(store, make_order, monkeypatch):
    """Transfers do not retry; a stale source version fails the whole batch"""
    source = await make_order("1", [A])
    real_commit = store.commit

    async def racing_commit(batch):
        other = store.batch()
        other.update("orders", source, {"status": "ready"})
        await real_commit(other)
        return await real_commit(batch)

    monkeypatch.setattr(store, "commit", racing_commit)

    with pytest.raises(StoreError):
        await OrderService(store).transfer("1", "2")

    assert (await load(store, source)).payment_status == "pending"
    assert await find_open_orders(store, "2") == []


def test_transfer_tag_uses_table_labels(monkeypatch):
    monkeypatch.setattr(settings, "tables", {"1": "Terrace 1", "2": "Bar 2"})
    assert transfer_tag("1", "2") == "Transferred: Terrace 1 → Bar 2"
    assert transfer_tag("1", "9") == "Transferred: Terrace 1 → 9"
