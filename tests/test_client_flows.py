import unittest
from decimal import Decimal

import requests

from payportal.client import ApprovalQueue, LedgerView, PaymentRequestBuilder, PortalClient, SessionStore, build_draft
from payportal.errors import (
    ActionInFlight,
    Conflict,
    Forbidden,
    InvalidAmount,
    NetworkFailure,
    SubmissionFailed,
    Timeout,
    Unauthorized,
    UnsupportedCurrency,
    ValidationError,
)
from payportal.services.ledger import NO_DATA
from tests.support import BASE_URL, PASSWORD, FailingAdapter, FlaskAdapter, PortalTestCase, http_session


class TestBuildDraft(unittest.TestCase):
    def test_preview_shows_converted_amount(self):
        draft = build_draft(" bob@example.com ", "FIRNZAJJ", "100", "USD")
        self.assertEqual(draft.amount, Decimal("1912.00"))
        self.assertEqual(draft.original_amount, Decimal("100.00"))
        self.assertEqual(draft.recipient_email, "bob@example.com")
        self.assertFalse(draft.confirmed)
        self.assertEqual(draft.preview, "You are trying to send R1912.00 to bob@example.com.")

    def test_confirm_returns_confirmed_copy(self):
        draft = build_draft("bob@example.com", "FIRNZAJJ", 5, "ZAR")
        confirmed = draft.confirm()
        self.assertTrue(confirmed.confirmed)
        self.assertFalse(draft.confirmed)
        self.assertEqual(confirmed.amount, Decimal("5.00"))

    def test_missing_fields(self):
        with self.assertRaises(ValidationError) as ctx:
            build_draft("", "  ", "10", "USD")
        self.assertEqual(ctx.exception.fields, ["recipientEmail", "swiftCode"])

    def test_converter_errors_propagate(self):
        with self.assertRaises(InvalidAmount):
            build_draft("bob@example.com", "FIRNZAJJ", "-1", "USD")
        with self.assertRaises(UnsupportedCurrency):
            build_draft("bob@example.com", "FIRNZAJJ", "1", "JPY")

    def test_amount_rounded_to_cents_before_conversion(self):
        draft = build_draft("bob@example.com", "FIRNZAJJ", "1.005", "USD")
        self.assertEqual(draft.original_amount, Decimal("1.01"))
        self.assertEqual(draft.amount, Decimal("19.31"))

    def test_sub_cent_amount(self):
        with self.assertRaises(InvalidAmount):
            build_draft("bob@example.com", "FIRNZAJJ", "0.004", "ZAR")


class ClientTestCase(PortalTestCase):
    def setUp(self):
        super().setUp()
        self.http = http_session(FlaskAdapter(self.app))

    def portal(self, email=None):
        client = PortalClient(BASE_URL, SessionStore(), http=self.http)
        if email:
            client.login(email, PASSWORD)
        return client


class TestPaymentLifecycle(ClientTestCase):
    def setUp(self):
        super().setUp()
        self.register("sender@example.com")
        self.register("recipient@example.com")
        self.make_admin("admin@example.com")
        self.user = self.portal("sender@example.com")
        self.admin = self.portal("admin@example.com")

    def test_submit_approve_updates_balance(self):
        ledger = LedgerView(self.user).refresh()
        self.assertEqual(ledger.balance, Decimal("0.00"))
        self.assertIs(ledger.summary(), NO_DATA)

        refreshed = []
        builder = PaymentRequestBuilder(self.user, on_submitted=lambda: refreshed.append(ledger.refresh()))
        draft = builder.build_draft("recipient@example.com", "FIRNZAJJ", "100", "USD")
        payment_id = builder.submit(draft.confirm())

        self.assertEqual(len(refreshed), 1)
        self.assertEqual(ledger.history()[0]["id"], payment_id)
        self.assertEqual(ledger.history()[0]["status"], "pending")
        self.assertEqual(ledger.balance, Decimal("0.00"))

        queue = ApprovalQueue(self.admin)
        self.assertEqual([p["id"] for p in queue.list_pending()], [payment_id])
        result = queue.approve(payment_id)
        self.assertEqual(result["status"], "approved")
        self.assertEqual(queue.pending, [])
        self.assertFalse(queue.is_busy(payment_id))

        ledger.refresh()
        self.assertEqual(ledger.balance, Decimal("-1912.00"))
        summary = ledger.summary()
        self.assertEqual(summary.money_out, Decimal("1912.00"))
        self.assertEqual(summary.money_in, Decimal("0.00"))

        recipient_ledger = LedgerView(self.portal("recipient@example.com")).refresh()
        self.assertEqual(recipient_ledger.balance, Decimal("1912.00"))

    def test_failed_refresh_keeps_payment_id(self):
        def refresh():
            raise NetworkFailure("ledger unavailable")

        builder = PaymentRequestBuilder(self.user, on_submitted=refresh)
        payment_id = builder.submit(build_draft("recipient@example.com", "FIRNZAJJ", "0.125", "ZAR").confirm())

        self.assertFalse(builder.is_busy)
        history = self.user.get_history()
        self.assertEqual([t["id"] for t in history], [payment_id])
        self.assertEqual(history[0]["amount"], "0.13")

    def test_unconfirmed_draft_is_not_sent(self):
        builder = PaymentRequestBuilder(self.user)
        draft = build_draft("recipient@example.com", "FIRNZAJJ", "10", "EUR")
        with self.assertRaises(ValidationError):
            builder.submit(draft)
        self.assertEqual(self.user.get_history(), [])

    def test_failed_submit_leaves_nothing_behind(self):
        called = []
        builder = PaymentRequestBuilder(self.user, on_submitted=lambda: called.append(True))
        draft = build_draft("ghost@example.com", "FIRNZAJJ", "10", "GBP").confirm()
        with self.assertRaises(SubmissionFailed):
            builder.submit(draft)
        self.assertEqual(called, [])
        self.assertFalse(builder.is_busy)
        self.assertEqual(self.user.get_history(), [])

    def test_second_approve_raises_conflict_and_refreshes(self):
        payment_id = self.user.submit_payment("recipient@example.com", "FIRNZAJJ", Decimal("50.00"), "ZAR")["id"]
        queue = ApprovalQueue(self.admin)
        queue.approve(payment_id)

        other_admin_queue = ApprovalQueue(self.admin)
        other_admin_queue.pending = [{"id": payment_id}]
        with self.assertRaises(Conflict):
            other_admin_queue.approve(payment_id)
        self.assertEqual(other_admin_queue.pending, [])
        self.assertFalse(other_admin_queue.is_busy(payment_id))

        self.assertEqual(LedgerView(self.user).refresh().balance, Decimal("-50.00"))

    def fail_refetch(self):
        def list_pending():
            raise NetworkFailure("queue unavailable")
        self.admin.list_pending = list_pending

    def test_failed_refetch_keeps_approve_result(self):
        payment_id = self.user.submit_payment("recipient@example.com", "FIRNZAJJ", Decimal("50.00"), "ZAR")["id"]
        queue = ApprovalQueue(self.admin)
        queue.list_pending()
        self.fail_refetch()

        result = queue.approve(payment_id)
        self.assertEqual(result["status"], "approved")
        self.assertIsInstance(queue.refresh_error, NetworkFailure)
        self.assertEqual([p["id"] for p in queue.pending], [payment_id])
        self.assertFalse(queue.is_busy(payment_id))
        self.assertEqual(LedgerView(self.user).refresh().balance, Decimal("-50.00"))

    def test_failed_refetch_keeps_conflict(self):
        payment_id = self.user.submit_payment("recipient@example.com", "FIRNZAJJ", Decimal("50.00"), "ZAR")["id"]
        ApprovalQueue(self.admin).reject(payment_id)
        self.fail_refetch()

        queue = ApprovalQueue(self.admin)
        with self.assertRaises(Conflict):
            queue.approve(payment_id)
        self.assertIsInstance(queue.refresh_error, NetworkFailure)
        self.assertFalse(queue.is_busy(payment_id))

    def test_reject_removes_from_queue(self):
        payment_id = self.user.submit_payment("recipient@example.com", "FIRNZAJJ", Decimal("50.00"), "ZAR")["id"]
        queue = ApprovalQueue(self.admin)
        self.assertEqual(queue.reject(payment_id)["status"], "rejected")
        self.assertEqual(queue.list_pending(), [])
        with self.assertRaises(Conflict):
            queue.approve(payment_id)
        self.assertEqual(LedgerView(self.user).refresh().balance, Decimal("0.00"))

    def test_in_flight_guard_blocks_same_id(self):
        queue = ApprovalQueue(self.admin)
        queue._in_flight.add("abc")
        with self.assertRaises(ActionInFlight):
            queue.approve("abc")
        with self.assertRaises(ActionInFlight):
            queue.reject("abc")

    def test_non_admin_is_forbidden_locally(self):
        queue = ApprovalQueue(self.user)
        with self.assertRaises(Forbidden):
            queue.list_pending()
        with self.assertRaises(Forbidden):
            queue.approve("any-id")

    def test_non_admin_is_forbidden_by_server(self):
        # A session that claims admin still meets the server-side role check
        self.user.session.role = "admin"
        with self.assertRaises(Forbidden):
            ApprovalQueue(self.user).list_pending()

    def test_add_admin(self):
        created = self.admin.add_admin("Nora", "New", "7001015009087", "nora@example.com", PASSWORD)
        self.assertEqual(created["user"]["role"], "admin")
        self.assertEqual(self.portal("nora@example.com").session.role, "admin")


class TestSessionHandling(ClientTestCase):
    def setUp(self):
        super().setUp()
        self.register("sender@example.com")

    def test_login_stores_role(self):
        client = self.portal("sender@example.com")
        self.assertTrue(client.session.is_authenticated)
        self.assertEqual(client.session.role, "user")

    def test_bad_credentials(self):
        client = self.portal()
        with self.assertRaises(Unauthorized):
            client.login("sender@example.com", "wrong-password")
        with self.assertRaises(ValidationError):
            client.login("", "")
        self.assertFalse(client.session.is_authenticated)

    def test_unauthorized_clears_session(self):
        client = self.portal()
        client.session.login("stale-token", "user")
        with self.assertRaises(Unauthorized):
            client.get_balance()
        self.assertFalse(client.session.is_authenticated)

    def test_logout_revokes_and_clears(self):
        client = self.portal("sender@example.com")
        token = client.session.token
        client.logout()
        self.assertFalse(client.session.is_authenticated)

        client.session.login(token, "user")
        with self.assertRaises(Unauthorized):
            client.get_history()

    def test_register_through_client(self):
        created = self.portal().register("Zed", "Zulu", "5001015009087", "zed@example.com", PASSWORD)
        self.assertEqual(created["user"]["email"], "zed@example.com")
        with self.assertRaises(Conflict):
            self.portal().register("Zed", "Zulu", "5001015009087", "zed@example.com", PASSWORD)


class TestTransportFailures(unittest.TestCase):
    def client_with(self, exc):
        session = SessionStore()
        session.login("tok", "user")
        adapter = FailingAdapter(exc)
        return PortalClient(BASE_URL, session, timeout=0.5, http=http_session(adapter)), adapter

    def test_timeout_is_typed(self):
        client, _ = self.client_with(requests.ReadTimeout("slow"))
        with self.assertRaises(Timeout):
            client.get_balance()
        self.assertTrue(client.session.is_authenticated)

    def test_connection_error_is_network_failure(self):
        client, _ = self.client_with(requests.ConnectionError("refused"))
        with self.assertRaises(NetworkFailure):
            client.list_pending()

    def test_submit_network_failure_is_submission_failed(self):
        client, adapter = self.client_with(requests.ConnectionError("refused"))
        builder = PaymentRequestBuilder(client)
        draft = build_draft("bob@example.com", "FIRNZAJJ", "1", "USD").confirm()
        with self.assertRaises(SubmissionFailed) as ctx:
            builder.submit(draft)
        self.assertIsInstance(ctx.exception.__cause__, NetworkFailure)
        self.assertEqual(adapter.calls, 1)

    def test_submit_while_in_flight(self):
        client, adapter = self.client_with(requests.ConnectionError("refused"))
        builder = PaymentRequestBuilder(client)
        builder._in_flight = True
        with self.assertRaises(ActionInFlight):
            builder.submit(build_draft("bob@example.com", "FIRNZAJJ", "1", "USD").confirm())
        self.assertEqual(adapter.calls, 0)


if __name__ == "__main__":
    unittest.main()
