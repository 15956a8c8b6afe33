# listing_critic/core/finance/stamp_duty.py
"""
Stamp Duty Land Tax (England & NI, standard residential rates).

Marginal bands: 0% to £250k, 5% to £925k, 10% to £1.5m, 12% above.
First-time-buyer relief and the additional-dwelling surcharge are not modelled.
"""

from __future__ import annotations

# (upper bound of band, marginal rate); None = no upper bound
SDLT_BANDS: tuple[tuple[float | None, float], ...] = (
    (250_000, 0.00),
    (925_000, 0.05),
    (1_500_000, 0.10),
    (None, 0.12),
)


def stamp_duty(price: float) -> float:
    """Marginal SDLT on a purchase price; 0 for non-positive prices."""
    if price <= 0:
        return 0.0
    tax = 0.0
    lower = 0.0
    for upper, rate in SDLT_BANDS:
        top = price if upper is None else min(price, upper)
        if top > lower:
            tax += (top - lower) * rate
        if upper is None or price <= upper:
            break
        lower = upper
    return round(tax, 2)
