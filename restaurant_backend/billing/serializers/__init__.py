from .bill import BillSerializer, BillSummarySerializer, pricing_payload
from .commands import (
    EditBillInputSerializer,
    OpenBillInputSerializer,
    PayBillInputSerializer,
)

__all__ = [
    "BillSerializer",
    "BillSummarySerializer",
    "EditBillInputSerializer",
    "OpenBillInputSerializer",
    "PayBillInputSerializer",
    "pricing_payload",
]
