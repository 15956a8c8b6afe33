# listing_critic/core/finance/mortgage.py

from __future__ import annotations

from dataclasses import dataclass

from listing_critic.schemas.models import MortgagePayment

from .amortization import monthly_payment

MORTGAGE_TERM_YEARS = 25


@dataclass(frozen=True)
class MortgageScenario:
    ltv: float  # percent
    rate: float  # annual percent


# Indicative UK high-street rates by loan-to-value band
MORTGAGE_SCENARIOS: tuple[MortgageScenario, ...] = (
    MortgageScenario(ltv=90, rate=5.25),
    MortgageScenario(ltv=80, rate=4.95),
    MortgageScenario(ltv=70, rate=4.65),
)


def mortgage_scenarios(
    price: float,
    scenarios: tuple[MortgageScenario, ...] = MORTGAGE_SCENARIOS,
    years: int = MORTGAGE_TERM_YEARS,
) -> list[MortgagePayment]:
    """Deposit and monthly repayment for each LTV band; amounts rounded to whole pounds."""
    out: list[MortgagePayment] = []
    for s in scenarios:
        loan = price * s.ltv / 100.0
        out.append(
            MortgagePayment(
                deposit=round(price - loan),
                ltv=s.ltv,
                monthly_payment=round(monthly_payment(loan, s.rate, years)),
                rate=s.rate,
            )
        )
    return out
