"""Tests for the client cart mirror and its reducer"""

import asyncio

import httpx
import pytest

from cart_client import CartMirror
from cart_client.reducer import (
    CartState,
    CloseCart,
    Hydrate,
    SetCartUrl,
    ToggleCart,
    UpdateCart,
    cart_reducer,
)

BASE_URL = "http://testserver"


async def wait_for(condition, timeout: float = 2.0) -> None:
    deadline = asyncio.get_running_loop().time() + timeout
    while not condition():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)


def quantities(state: CartState) -> dict[int, int]:
    return {item["id"]: item["quantity"] for item in state.items}


@pytest.fixture
async def mirror(http_client: httpx.AsyncClient):
    mirror = CartMirror(BASE_URL, http_client=http_client, poll_interval=0.05)
    yield mirror
    await mirror.close()


class TestReducer:

    def test_update_cart_replaces_items_and_keeps_open_state(self):
        state = CartState(items=({"id": 1, "price": 10.0, "quantity": 1},), is_open=True)

        new_state = cart_reducer(state, UpdateCart({
            "items": [{"id": 2, "price": 5.0, "quantity": 3}],
            "isOpen": False,
            "cartUrl": "https://example/cart.json",
        }))

        assert quantities(new_state) == {2: 3}
        assert new_state.is_open is True
        assert new_state.cart_url == "https://example/cart.json"

    def test_hydrate(self):
        state = cart_reducer(CartState(), Hydrate({"items": [{"id": 4, "price": 1.0, "quantity": 2}]}))
        assert quantities(state) == {4: 2}

    def test_toggle_and_close(self):
        opened = cart_reducer(CartState(), ToggleCart())
        assert opened.is_open is True
        assert cart_reducer(opened, ToggleCart()).is_open is False
        assert cart_reducer(opened, CloseCart()).is_open is False

    def test_set_cart_url(self):
        assert cart_reducer(CartState(), SetCartUrl("u")).cart_url == "u"

    def test_totals(self):
        state = CartState(items=(
            {"id": 1, "price": 65.0, "quantity": 2},
            {"id": 3, "price": 72.5, "quantity": 1},
        ))
        assert state.total == 202.5
        assert state.item_count == 3


class TestMutations:

    async def test_add_item_mirrors_server(self, mirror: CartMirror):
        await mirror.add_item(7, 2)
        await mirror.add_item(7, 3)

        assert quantities(mirror.state) == {7: 5}
        assert mirror.guest_session_id
        assert mirror.state.cart_url.endswith(f"guests/{mirror.guest_session_id}/cart.json")

    async def test_remove_and_update(self, mirror: CartMirror):
        await mirror.add_item(1, 1)
        await mirror.add_item(2, 1)

        await mirror.remove_item(1)
        assert quantities(mirror.state) == {2: 1}

        await mirror.update_quantity(2, 4)
        assert quantities(mirror.state) == {2: 4}

    async def test_update_missing_item_is_silent_noop(self, mirror: CartMirror, caplog):
        await mirror.add_item(2, 1)
        before = mirror.state

        await mirror.update_quantity(5, 3)

        assert mirror.state == before
        assert "Failed to update quantity" not in caplog.text

    async def test_failed_request_is_logged_not_raised(self, mirror: CartMirror, caplog):
        await mirror.add_item(9999, 1)

        assert mirror.state.items == ()
        assert "Failed to add item" in caplog.text

    async def test_clear_cart(self, mirror: CartMirror):
        await mirror.add_item(3, 2)

        await mirror.clear_cart()

        assert mirror.state.items == ()

    async def test_listeners_notified(self, mirror: CartMirror):
        seen = []
        unsubscribe = mirror.subscribe(seen.append)

        await mirror.add_item(3, 1)
        unsubscribe()
        await mirror.add_item(3, 1)

        assert len(seen) == 1
        assert quantities(seen[0]) == {3: 1}

    async def test_concurrent_requests_apply_in_issue_order(self, mirror: CartMirror):
        applied = []
        mirror.subscribe(lambda state: applied.append(quantities(state)))

        async with mirror._lock:
            first = asyncio.create_task(mirror.add_item(1, 1))
            second = asyncio.create_task(mirror.update_quantity(1, 5))
            await asyncio.sleep(0)

        await asyncio.gather(first, second)

        assert applied == [{1: 1}, {1: 5}]
        assert quantities(mirror.state) == {1: 5}


class TestOwnerSwitching:

    async def test_set_wallet_id_refetches(self, mirror: CartMirror, other_device: httpx.AsyncClient):
        await other_device.post("/api/cart/add?walletId=wallet-1", json={"id": 6, "quantity": 2})
        await mirror.add_item(1, 1)

        await mirror.set_wallet_id("wallet-1")

        assert mirror.wallet_id == "wallet-1"
        assert quantities(mirror.state) == {6: 2}

        await mirror.set_wallet_id(None)
        assert quantities(mirror.state) == {1: 1}

    async def test_response_for_previous_owner_is_dropped(self, mirror: CartMirror):
        await mirror.fetch_cart()

        async with mirror._lock:
            pending = asyncio.create_task(mirror.add_item(7, 2))
            await asyncio.sleep(0)
            mirror._switch_owner("wallet-2")

        await pending

        assert mirror.state.items == ()

    async def test_migrate_guest_cart(self, mirror: CartMirror, other_device: httpx.AsyncClient):
        await mirror.add_item(1, 2)
        await other_device.post("/api/cart/add?walletId=wallet-3", json={"id": 1, "quantity": 3})

        migrated = await mirror.migrate_guest_cart("wallet-3")

        assert migrated is True
        assert mirror.wallet_id == "wallet-3"
        assert quantities(mirror.state) == {1: 5}

        guest = await mirror._http_client.get("/api/cart/storage")
        assert guest.json()["items"] == []

    async def test_migrate_rejected_for_foreign_session(self, mirror: CartMirror, caplog):
        await mirror.add_item(1, 2)

        migrated = await mirror.migrate_guest_cart("wallet-3", guest_session_id="not-mine")

        assert migrated is False
        assert mirror.wallet_id is None
        assert "Failed to migrate guest cart" in caplog.text


class TestPolling:

    async def test_polls_while_closed(self, mirror: CartMirror, other_device: httpx.AsyncClient):
        await mirror.set_wallet_id("wallet-poll")
        await mirror.start()
        assert mirror.is_polling

        await other_device.post("/api/cart/add?walletId=wallet-poll", json={"id": 8, "quantity": 1})

        await wait_for(lambda: quantities(mirror.state) == {8: 1})

    async def test_suspended_while_open_and_resumed_on_close(
        self, mirror: CartMirror, other_device: httpx.AsyncClient
    ):
        await mirror.set_wallet_id("wallet-poll")
        await mirror.start()

        mirror.toggle_cart()
        assert mirror.state.is_open is True
        assert not mirror.is_polling

        await other_device.post("/api/cart/add?walletId=wallet-poll", json={"id": 8, "quantity": 1})
        await asyncio.sleep(mirror.poll_interval * 4)
        assert mirror.state.items == ()

        mirror.close_cart()
        assert mirror.is_polling
        await wait_for(lambda: quantities(mirror.state) == {8: 1})

    async def test_close_stops_polling(self, mirror: CartMirror):
        await mirror.start()

        await mirror.close()

        assert not mirror.is_polling

    async def test_unexpected_refresh_error_keeps_polling(
        self, mirror: CartMirror, other_device: httpx.AsyncClient, caplog
    ):
        await mirror.set_wallet_id("wallet-poll")
        await mirror.start()

        refresh = mirror.fetch_cart
        failures = []

        async def flaky_refresh():
            if not failures:
                failures.append(True)
                raise RuntimeError("unexpected refresh failure")
            await refresh()

        mirror.fetch_cart = flaky_refresh
        await wait_for(lambda: failures)
        await other_device.post("/api/cart/add?walletId=wallet-poll", json={"id": 8, "quantity": 1})

        await wait_for(lambda: quantities(mirror.state) == {8: 1})
        assert mirror.is_polling
        assert "Cart refresh failed" in caplog.text
