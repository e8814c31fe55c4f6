"""Client-side cart persisted as JSON in a string key/value store.

The storage is anything shaped like browser local storage: a mutable mapping
of string keys to string values. The whole cart lives under ``CART_KEY``.
"""
import json
import logging
from typing import Any, List, MutableMapping

from storefront_api.cart.cart_models import CartLine, CartTotals

logger = logging.getLogger(__name__)

CART_KEY = "wp_cart_v1"


class CartStore:
    def __init__(self, storage: MutableMapping[str, str], key: str = CART_KEY) -> None:
        self._storage = storage
        self._key = key

    def _read(self) -> dict[str, dict[str, Any]]:
        raw = self._storage.get(self._key)
        if not raw:
            return {}
        try:
            state = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable cart state under %s", self._key)
            return {}
        items = state.get("items") if isinstance(state, dict) else None
        if not isinstance(items, dict):
            return {}
        return {key: raw for key, raw in items.items() if isinstance(raw, dict)}

    def _parse(self, key: str, raw: dict[str, Any]) -> CartLine | None:
        try:
            return CartLine.from_dict(raw)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping malformed cart line %s: %s", key, e)
            return None

    def _write(self, items: dict[str, dict[str, Any]]) -> None:
        self._storage[self._key] = json.dumps({"items": items})

    def get_cart(self) -> dict[str, CartLine]:
        cart = {}
        for key, raw in self._read().items():
            line = self._parse(key, raw)
            if line is not None:
                cart[key] = line
        return cart

    def get_item(self, id: str) -> CartLine | None:
        raw = self._read().get(id)
        return self._parse(id, raw) if raw else None

    def items(self) -> List[CartLine]:
        return list(self.get_cart().values())

    def add_or_update(self, line: CartLine) -> CartLine | None:
        """Store ``line`` with its quantity clamped to what is available.

        A clamped quantity of zero removes the line; None is returned then.
        """
        items = self._read()
        quantity = max(0, min(line.available_qty, line.quantity))
        if quantity == 0:
            items.pop(line.id, None)
            self._write(items)
            return None

        line.quantity = quantity
        line.currency = (line.currency or "usd").lower()
        items[line.id] = line.as_dict()
        self._write(items)
        return line

    def increment(self, id: str, step: int = 1) -> CartLine | None:
        line = self.get_item(id)
        if line is None:
            return None
        line.quantity += step
        return self.add_or_update(line)

    def decrement(self, id: str, step: int = 1) -> CartLine | None:
        # quantity controls never go below one; use remove() to drop a line
        line = self.get_item(id)
        if line is None:
            return None
        line.quantity = max(1, line.quantity - step)
        return self.add_or_update(line)

    def remove(self, id: str) -> None:
        items = self._read()
        if id not in items:
            return
        del items[id]
        self._write(items)

    def clear(self) -> None:
        self._write({})

    def totals(self) -> CartTotals:
        total_units = 0
        original = 0
        subtotal = 0
        for line in self.items():
            total_units += line.quantity
            original += line.unit_amount * line.quantity
            subtotal += line.effective_unit_cents * line.quantity
        return CartTotals(
            total_units=total_units,
            original_total_cents=original,
            subtotal_cents=subtotal,
        )
