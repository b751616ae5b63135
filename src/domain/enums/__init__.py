"""Domain enums.

Available Enums:
    - CacheStrategy: Stampede mitigation strategy chosen per lookup
"""

from src.domain.enums.cache_strategy import CacheStrategy

__all__ = ["CacheStrategy"]
