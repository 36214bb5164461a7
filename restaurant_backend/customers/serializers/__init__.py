from .customer import (
    CustomerBriefSerializer,
    CustomerNameSerializer,
    CustomerSerializer,
    PhoneLookupSerializer,
    StampAdjustmentSerializer,
)

__all__ = [
    "CustomerBriefSerializer",
    "CustomerNameSerializer",
    "CustomerSerializer",
    "PhoneLookupSerializer",
    "StampAdjustmentSerializer",
]
