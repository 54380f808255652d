"""Stock summary report."""

from inventory.stock import StockItem


def total_units(items: list[StockItem]) -> int:
    return sum(item.quantity for item in items)
