"""
listing-critic: UK property listing scraper, enricher and brutal critic.

Public entry points live in `listing_critic.tools.listing_pipeline`.
"""

__version__ = "0.3.0"
