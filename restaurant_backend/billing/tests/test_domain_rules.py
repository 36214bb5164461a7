# billing/tests/test_domain_rules.py

from types import SimpleNamespace

from django.test import SimpleTestCase

from billing.models import Bill
from billing.services import loyalty
from billing.services.bill_lifecycle import can_transition, ensure_open, validate_transition
from billing.services.exceptions import InsufficientStampsError, InvalidBillStateError


class LoyaltyRuleTests(SimpleTestCase):
    def test_redeem_needs_ten_stamps(self):
        self.assertFalse(loyalty.can_redeem(9))
        self.assertTrue(loyalty.can_redeem(10))
        self.assertEqual(loyalty.redeem(12), 2)

    def test_redeem_below_threshold_reports_current_balance(self):
        with self.assertRaises(InsufficientStampsError) as ctx:
            loyalty.redeem(7)
        self.assertEqual(ctx.exception.message, "Customer needs 10 stamps to redeem. Current: 7")
        self.assertEqual(ctx.exception.code, "INSUFFICIENT_STAMPS")

    def test_paid_bill_accrues_one_stamp(self):
        self.assertEqual(loyalty.accrue(3, loyalty_free_applied=False), 4)

    def test_redeeming_bill_does_not_accrue(self):
        self.assertEqual(loyalty.accrue(3, loyalty_free_applied=True), 3)

    def test_adjust_never_goes_negative(self):
        self.assertEqual(loyalty.adjust(5, -5), 0)
        with self.assertRaises(ValueError):
            loyalty.adjust(5, -6)


class BillLifecycleTests(SimpleTestCase):
    def _bill(self, status):
        return SimpleNamespace(id="b-1", status=status)

    def test_open_can_close_or_void(self):
        self.assertTrue(can_transition(from_status=Bill.STATUS_OPEN, to_status=Bill.STATUS_CLOSED))
        self.assertTrue(can_transition(from_status=Bill.STATUS_OPEN, to_status=Bill.STATUS_VOID))

    def test_terminal_states_are_final(self):
        for terminal in (Bill.STATUS_CLOSED, Bill.STATUS_VOID):
            for target in (Bill.STATUS_OPEN, Bill.STATUS_CLOSED, Bill.STATUS_VOID):
                self.assertFalse(can_transition(from_status=terminal, to_status=target))

    def test_validate_transition_raises(self):
        with self.assertRaises(InvalidBillStateError):
            validate_transition(bill=self._bill(Bill.STATUS_CLOSED), target_status=Bill.STATUS_VOID)

    def test_ensure_open_message(self):
        with self.assertRaises(InvalidBillStateError) as ctx:
            ensure_open(bill=self._bill(Bill.STATUS_VOID), action="update")
        self.assertEqual(ctx.exception.message, "Cannot update a void bill")
        ensure_open(bill=self._bill(Bill.STATUS_OPEN), action="update")
