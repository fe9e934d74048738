# rules/policy_config.py

from decimal import Decimal
from typing import Any, Dict, List

# --- Structurally special bucket names ---
NECESSITY_BUCKET = "Necessity"
SAVINGS_BUCKET = "Savings"
EXPENSES_BUCKET = "Expenses"

# Buckets that never receive a fixed share of net income
NON_ALLOCATION_BUCKETS = (SAVINGS_BUCKET, EXPENSES_BUCKET)

# --- Income split policy ---
# Fixed policy constants; the per-bucket allocation_pct column is display metadata
# and is never read by the engine.
NECESSITY_SHARE = Decimal("0.60")
OTHER_BUCKET_SHARE = Decimal("0.10")

# Template for the lazily materialized Expenses bucket
EXPENSES_BUCKET_TEMPLATE: Dict[str, Any] = {
    "name": EXPENSES_BUCKET,
    "allocation_pct": Decimal("0.00"),
    "limiter_light": Decimal("1.00"),
    "limiter_intermediate": Decimal("1.00"),
    "limiter_strict": Decimal("1.00"),
    "limiter_desperate": None,
    "display_order": 99,
    "color": "#7c3aed",
}

# --- Default catalog (seed data) ---
DEFAULT_BUCKETS: List[Dict[str, Any]] = [
    {
        "name": NECESSITY_BUCKET, "allocation_pct": Decimal("60.00"), "display_order": 1, "color": "#0891b2",
        "limiter_light": Decimal("2"), "limiter_intermediate": Decimal("3"),
        "limiter_strict": Decimal("6"), "limiter_desperate": Decimal("1.5"),
    },
    {
        "name": "Investment", "allocation_pct": Decimal("10.00"), "display_order": 2, "color": "#14b8a6",
        "limiter_light": Decimal("2"), "limiter_intermediate": Decimal("3"),
        "limiter_strict": Decimal("5"), "limiter_desperate": Decimal("1.5"),
    },
    {
        "name": "Learning", "allocation_pct": Decimal("10.00"), "display_order": 3, "color": "#0ea5e9",
        "limiter_light": Decimal("2"), "limiter_intermediate": Decimal("3"),
        "limiter_strict": Decimal("5"), "limiter_desperate": Decimal("1.5"),
    },
    {
        "name": "Emergency", "allocation_pct": Decimal("10.00"), "display_order": 4, "color": "#ef4444",
        "limiter_light": Decimal("2"), "limiter_intermediate": Decimal("3"),
        "limiter_strict": Decimal("5"), "limiter_desperate": Decimal("1.2"),
    },
    {
        "name": "Fun", "allocation_pct": Decimal("10.00"), "display_order": 5, "color": "#f59e0b",
        "limiter_light": Decimal("10"), "limiter_intermediate": Decimal("10"),
        "limiter_strict": Decimal("10"), "limiter_desperate": Decimal("5"),
    },
    {
        "name": SAVINGS_BUCKET, "allocation_pct": Decimal("0.00"), "display_order": 6, "color": "#64748b",
        "limiter_light": Decimal("1"), "limiter_intermediate": Decimal("1"),
        "limiter_strict": Decimal("1"), "limiter_desperate": None,
    },
]
