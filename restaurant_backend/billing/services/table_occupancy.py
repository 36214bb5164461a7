# billing/services/table_occupancy.py

"""
TABLE OCCUPANCY COORDINATOR

Keeps Table.status / Table.current_bill consistent with the bill lifecycle:
- bill opened  -> table OCCUPIED, current_bill = bill
- bill leaves OPEN (paid or voided) -> table AVAILABLE, current_bill = None

Both fields are written in one UPDATE on a row the caller has already
locked (select_for_update) inside the bill transaction.
"""

from __future__ import annotations

import logging

from tables.models import Table

logger = logging.getLogger(__name__)


def occupy(*, table: Table, bill) -> Table:
    table.status = Table.STATUS_OCCUPIED
    table.current_bill = bill
    table.save(update_fields=["status", "current_bill", "updated_at"])
    return table


def release(*, table: Table, bill) -> Table:
    if table.current_bill_id not in (None, bill.id):
        logger.warning(
            "Table holds a different bill; left untouched",
            extra={
                "table_id": str(table.id),
                "bill_id": str(bill.id),
                "current_bill_id": str(table.current_bill_id),
            },
        )
        return table

    table.status = Table.STATUS_AVAILABLE
    table.current_bill = None
    table.save(update_fields=["status", "current_bill", "updated_at"])
    return table
