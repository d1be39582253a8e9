"""
AI Builder: budget-constrained build allocator.

The budget is split into per-category ceilings by a fixed ratio table picked
by usage profile; each category gets the most expensive product that fits
under its ceiling. The ratios are independent caps and need not sum to 1.
"""
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from schemas import CATEGORIES, Build, Product

DEFAULT_RATIOS = {
    "cpu": "0.25",
    "gpu": "0.35",
    "motherboard": "0.12",
    "ram": "0.08",
    "storage": "0.08",
    "psu": "0.08",
    "cabinet": "0.04",
}

PROFILE_RATIOS = {
    "default": DEFAULT_RATIOS,
    "gaming": {**DEFAULT_RATIOS, "cpu": "0.20", "gpu": "0.40"},
    "editing": {**DEFAULT_RATIOS, "cpu": "0.35", "gpu": "0.25", "ram": "0.12"},
}

# below this many parts the UI reports "budget too low"
MIN_COMPLETE_PARTS = 3


def ratios_for(usage: Optional[str]) -> Dict[str, Decimal]:
    table = PROFILE_RATIOS.get(usage or "default", DEFAULT_RATIOS)
    return {cat: Decimal(r) for cat, r in table.items()}


def ceilings(budget: float, usage: Optional[str]) -> Dict[str, Decimal]:
    """Maximum price allowed per category (budget x ratio), exact decimal."""
    b = Decimal(str(budget))
    return {cat: b * r for cat, r in ratios_for(usage).items()}


def best_under(products: Iterable[Product], category: str, max_price: Decimal) -> Optional[Product]:
    """Most expensive product of ``category`` priced <= max_price; ties keep catalog order."""
    best = None
    for p in products:
        if p.category != category or p.price > max_price:
            continue
        if best is None or p.price > best.price:
            best = p
    return best


def allocate_build(budget: float, usage: Optional[str], products: List[Product]) -> Build:
    limits = ceilings(budget, usage)
    chosen = []
    for cat in CATEGORIES:
        item = best_under(products, cat, limits[cat])
        if item is not None:
            chosen.append(item)
    return Build(build=chosen, total=sum(p.price for p in chosen))


def is_complete(build: Build) -> bool:
    return len(build.build) >= MIN_COMPLETE_PARTS
