"""Client cart state and reducer"""

from dataclasses import dataclass, field, replace
from typing import Union


@dataclass(frozen=True)
class CartState:
    """Last-known server cart plus local UI state"""
    items: tuple = ()
    is_open: bool = False
    cart_url: str = ""

    @property
    def total(self) -> float:
        return round(sum(item["price"] * item["quantity"] for item in self.items), 2)

    @property
    def item_count(self) -> int:
        return sum(item["quantity"] for item in self.items)


@dataclass(frozen=True)
class Hydrate:
    payload: dict = field(default_factory=dict)


@dataclass(frozen=True)
class ToggleCart:
    pass


@dataclass(frozen=True)
class CloseCart:
    pass


@dataclass(frozen=True)
class SetCartUrl:
    cart_url: str


@dataclass(frozen=True)
class UpdateCart:
    payload: dict = field(default_factory=dict)


CartAction = Union[Hydrate, ToggleCart, CloseCart, SetCartUrl, UpdateCart]


def _from_server(state: CartState, payload: dict) -> CartState:
    # isOpen is local UI state; the server copy is ignored
    return replace(
        state,
        items=tuple(dict(item) for item in payload.get("items", [])),
        cart_url=payload.get("cartUrl", state.cart_url),
    )


def cart_reducer(state: CartState, action: CartAction) -> CartState:
    """Apply an action to the client cart state"""
    if isinstance(action, (Hydrate, UpdateCart)):
        return _from_server(state, action.payload)
    if isinstance(action, ToggleCart):
        return replace(state, is_open=not state.is_open)
    if isinstance(action, CloseCart):
        return replace(state, is_open=False)
    if isinstance(action, SetCartUrl):
        return replace(state, cart_url=action.cart_url)
    return state
