from .bill import MAX_HEAD_COUNT, MAX_MONEY, Bill

__all__ = ["Bill", "MAX_HEAD_COUNT", "MAX_MONEY"]
