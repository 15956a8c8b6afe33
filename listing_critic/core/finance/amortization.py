# listing_critic/core/finance/amortization.py

from __future__ import annotations

MONTHS_PER_YEAR = 12


def amortization_payment(principal: float, rate: float, periods: int) -> float:
    """Per-period P&I payment for a fully amortizing loan (rate is the per-period fraction)."""
    if principal < 0:
        raise ValueError("principal must be >= 0")
    if periods < 0:
        raise ValueError("periods must be >= 0")
    if periods == 0:
        return 0.0
    if rate <= 0:
        return principal / periods
    r = rate
    return r * principal / (1.0 - (1.0 + r) ** (-periods))


def monthly_payment(principal: float, annual_rate_pct: float, years: int) -> float:
    """
    Standard repayment mortgage payment.

    `annual_rate_pct` is a percentage (5.25 means 5.25%); interest compounds
    monthly. A zero rate degrades to principal / months.
    """
    return amortization_payment(principal, annual_rate_pct / 100.0 / MONTHS_PER_YEAR, years * MONTHS_PER_YEAR)


def total_interest(principal: float, annual_rate_pct: float, years: int) -> float:
    """Interest paid over the full term."""
    return monthly_payment(principal, annual_rate_pct, years) * years * MONTHS_PER_YEAR - principal
