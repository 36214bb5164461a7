from .promotion import PromotionSerializer

__all__ = ["PromotionSerializer"]
