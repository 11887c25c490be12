"""Tests for the live hub fan-out"""

import pytest

from app.feed.hub import LiveHub
from app.runtime import Runtime


@pytest.mark.asyncio
async def test_queue_updates_reach_connected_clients(runtime, make_order):
    client = runtime.hub.connect()

    order_id = await make_order("1", [{"id": "a", "name": "A", "price": 2, "quantity": 1}])

    events = []
    while not client.empty():
        events.append(client.get_nowait())

    assert [event["type"] for event in events] == ["queue"]
    assert [o["id"] for o in events[0]["orders"]] == [order_id]
    runtime.hub.disconnect(client)
    assert runtime.hub.client_count == 0


@pytest.mark.asyncio
async def test_hub_as_alert_sink(store, make_order):
    """With no other sink the hub forwards alerts to its clients"""
    runtime = Runtime.build(store)
    await runtime.start()
    client = runtime.hub.connect()

    await make_order("1", [{"id": "a", "name": "A", "price": 2, "quantity": 1}])
    await runtime.waiter_calls.create_call("1", "Water please")

    events = []
    while not client.empty():
        events.append(client.get_nowait())
    runtime.stop()

    kinds = [(event["type"], event.get("kind")) for event in events]
    assert kinds == [
        ("alert", "new_order"),
        ("queue", None),
        ("alert", "waiter_call"),
        ("waiter_calls", None),
    ]
    assert events[2]["table_id"] == "1"
    assert events[2]["message"] == "Water please"


@pytest.mark.asyncio
async def test_full_client_misses_events():
    hub = LiveHub(max_pending=2)
    slow = hub.connect()
    fast = hub.connect()

    for n in range(3):
        hub.broadcast({"type": "alert", "n": n})
        if not fast.empty():
            fast.get_nowait()

    assert slow.qsize() == 2
    assert slow.get_nowait()["n"] == 0
    assert fast.empty()
