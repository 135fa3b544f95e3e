import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


class InventoryError(Exception):
    pass


@dataclass
class Item:
    name: str
    quantity: int = 0
    tags: list = field(default_factory=list)

    def is_available(self):
        return self.quantity > 0


class Inventory:
    def __init__(self, path):
        self.path = Path(path)
        self.items = {}

    def load(self):
        if not self.path.exists():
            logger.info("no inventory at %s", self.path)
            return
        with self.path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
        for entry in raw.get("items", []):
            item = Item(**entry)
            self.items[item.name] = item

    def save(self):
        payload = {"items": [vars(item) for item in self.items.values()]}
        with self.path.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)

    def add(self, name, quantity=1):
        item = self.items.setdefault(name, Item(name))
        item.quantity += quantity
        return item

    def remove(self, name, quantity=1):
        try:
            item = self.items[name]
        except KeyError:
            raise InventoryError(f"unknown item {name!r}") from None
        if item.quantity < quantity:
            raise InventoryError(f"not enough {name}")
        item.quantity -= quantity
        if item.quantity == 0:
            del self.items[name]

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        yield from sorted(self.items.values(), key=lambda item: item.name)


def summarize(inventory):
    total = sum(item.quantity for item in inventory)
    names = ", ".join(item.name for item in inventory if item.is_available())
    return {"total": total, "names": names}


async def refresh(inventory, fetch):
    for name in list(inventory.items):
        count = await fetch(name)
        if count is None:
            continue
        inventory.items[name].quantity = count


if __name__ == "__main__":
    inv = Inventory("inventory.json")
    inv.load()
    inv.add("apple", 3)
    print(summarize(inv))
    inv.save()
