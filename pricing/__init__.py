from .policy import PricingPolicy, default_pricing_policy, price_for_distance

__all__ = [
    "PricingPolicy",
    "default_pricing_policy",
    "price_for_distance",
]
