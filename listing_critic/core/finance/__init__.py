# listing_critic/core/finance/__init__.py

from .amortization import amortization_payment, monthly_payment, total_interest
from .mortgage import MORTGAGE_SCENARIOS, mortgage_scenarios
from .stamp_duty import stamp_duty

__all__ = [
    "amortization_payment",
    "monthly_payment",
    "total_interest",
    "mortgage_scenarios",
    "MORTGAGE_SCENARIOS",
    "stamp_duty",
]
