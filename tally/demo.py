"""Demo dataset used for demonstrations and screenshots."""

import random
from datetime import datetime, timedelta, timezone
from typing import Optional

from tally.models.category import Category, ExpenseItem


DEMO_CATEGORIES: dict[str, list[tuple[str, float, float]]] = {
    "Groceries": [
        ("Randall's", 25.0, 140.0),
        ("Trader Joe's", 15.0, 90.0),
        ("Farmers market", 8.0, 45.0),
        ("H-E-B", 30.0, 160.0),
    ],
    "Dining Out": [
        ("Coffee", 3.5, 7.5),
        ("Lunch with team", 12.0, 35.0),
        ("Pizza night", 18.0, 42.0),
        ("Tacos", 9.0, 22.0),
    ],
    "Transportation": [
        ("Gas", 30.0, 70.0),
        ("Parking", 5.0, 25.0),
        ("Car wash", 10.0, 30.0),
    ],
    "Utilities": [
        ("Electric bill", 80.0, 190.0),
        ("Water bill", 30.0, 75.0),
        ("Internet", 55.0, 90.0),
    ],
    "Entertainment": [
        ("Movie tickets", 12.0, 40.0),
        ("Concert", 45.0, 150.0),
        ("Streaming subscription", 9.99, 19.99),
    ],
}


def generate_demo_data(
    seed: Optional[int] = None,
    now: Optional[datetime] = None,
    items_per_category: int = 5,
) -> list[Category]:
    """
    Build a realistic dataset spread over the last 30 days.

    The same seed and `now` always produce the same amounts and dates.
    Identifiers are always fresh.
    """
    rng = random.Random(seed)
    now = now or datetime.now(timezone.utc)

    categories = []
    for name, templates in DEMO_CATEGORIES.items():
        items = []
        for _ in range(items_per_category):
            description, low, high = rng.choice(templates)
            items.append(
                ExpenseItem(
                    amount=round(rng.uniform(low, high), 2),
                    description=description,
                    date=now - timedelta(days=rng.randint(0, 29), minutes=rng.randint(0, 1439)),
                )
            )
        items.sort(key=lambda item: item.date, reverse=True)
        categories.append(Category(name=name, items=items))
    return categories
