"""
SalesRoles — Incentive Visualization Component
----------------------------------------------

Purpose
-------
Turn combined incentives into tables and Plotly figures that the Streamlit
pages can display.

Design
------
- Pure functions, no Streamlit imports (UI calls these).
- No network calls here: data comes from the store.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

import pandas as pd
import plotly.express as px

from core.incentives import EURO, PERCENT, parse_amount
from core.types import CombinedIncentive, Product, Role


def comparison_frame(
    products: Sequence[Product],
    roles: Sequence[Role],
    combined: Sequence[CombinedIncentive],
) -> pd.DataFrame:
    """
    One row per product in `combined`: each role's own commission (or "-"
    when the role does not contribute), then the combined totals.
    """
    by_id: Dict[str, Product] = {p.id: p for p in products}
    rows: List[dict] = []
    for ci in combined:
        product = by_id.get(ci.product_id)
        if product is None:
            continue
        row = {"Product": product.name}
        for role in roles:
            row[f"{role.title} (#{role.id})"] = product.commission if role.id in ci.role_combination else "-"
        row["Combined commission"] = ci.combined_commission
        row["Combined bonus"] = ci.combined_bonus
        rows.append(row)
    return pd.DataFrame(rows)


def combined_incentive_chart(products: Sequence[Product], combined: Sequence[CombinedIncentive]):
    """Bar chart of combined commission (%) per product, bonus as hover data."""
    names = {p.id: p.name for p in products}
    df = pd.DataFrame(
        [
            {
                "product": names.get(ci.product_id, ci.product_id),
                "commission_pct": float(parse_amount(ci.combined_commission, PERCENT)),
                "bonus_eur": float(parse_amount(ci.combined_bonus, EURO)),
                "roles": len(ci.role_combination),
            }
            for ci in combined
        ]
    )
    if df.empty:
        return None

    fig = px.bar(
        df,
        x="product",
        y="commission_pct",
        hover_data=["bonus_eur", "roles"],
        labels={"product": "Product", "commission_pct": "Combined commission (%)"},
        title="Combined commission by product",
    )
    fig.update_layout(margin=dict(l=10, r=10, t=40, b=10), xaxis_tickangle=-30)
    return fig
