"""
Portal API client.

Every call has a bounded timeout and ends either in parsed JSON or in one of
the typed errors from payportal.errors. A 401 also tears the session down so
the caller lands back in the logged-out state.
"""

import logging
from typing import Optional

import requests

from payportal import errors
from payportal.client.session import SessionStore

logger = logging.getLogger(__name__)

STATUS_ERRORS = {
    400: errors.ValidationError,
    401: errors.Unauthorized,
    403: errors.Forbidden,
    404: errors.NotFound,
    409: errors.Conflict,
}


def _error_message(response):
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason
    if isinstance(body, dict):
        return body.get("error") or body.get("message") or response.reason
    return response.reason


class PortalClient:
    def __init__(self, base_url: str, session: SessionStore, timeout: float = 10.0,
                 http: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.timeout = timeout
        self.http = http or requests.Session()

    @classmethod
    def from_config(cls, config, http=None):
        session = SessionStore(config.session_file)
        session.init()
        return cls(config.api_url, session, timeout=config.timeout, http=http)

    # ── Transport ────────────────────────────────────────────────────────────

    def _request(self, method: str, path: str, body: Optional[dict] = None,
                 authenticated: bool = True):
        url = f"{self.base_url}/{path.lstrip('/')}"
        headers = {"Accept": "application/json"}
        if authenticated:
            headers.update(self.session.auth_header())

        try:
            response = self.http.request(
                method, url, json=body, headers=headers, timeout=self.timeout
            )
        except requests.Timeout as e:
            raise errors.Timeout(f"{method} {path} timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise errors.NetworkFailure(f"Cannot reach {self.base_url}: {e}") from e

        if response.status_code >= 500:
            logger.error("%s %s failed with %s", method, path, response.status_code)
            raise errors.ServerError(_error_message(response))

        if response.status_code >= 400:
            error_cls = STATUS_ERRORS.get(response.status_code, errors.PortalError)
            if error_cls is errors.Unauthorized and authenticated:
                logger.info("Session rejected by server, logging out")
                self.session.teardown()
            raise error_cls(_error_message(response))

        try:
            return response.json()
        except ValueError as e:
            raise errors.ServerError(f"Malformed response from {method} {path}") from e

    def _get(self, path: str, authenticated: bool = True):
        return self._request("GET", path, authenticated=authenticated)

    def _post(self, path: str, body: Optional[dict] = None, authenticated: bool = True):
        return self._request("POST", path, body=body, authenticated=authenticated)

    # ── Auth ─────────────────────────────────────────────────────────────────

    def register(self, name: str, surname: str, id_number: str, email: str, password: str) -> dict:
        return self._post("auth/register", {
            "name": name,
            "surname": surname,
            "idNumber": id_number,
            "email": email,
            "password": password,
        }, authenticated=False)

    def login(self, email: str, password: str) -> dict:
        """Authenticate and keep the token and role in the session store."""
        if not email or not password:
            raise errors.ValidationError("Email and password are required")
        data = self._post("auth/login", {"email": email, "password": password},
                          authenticated=False)
        self.session.login(data["token"], data["user"]["role"])
        return data["user"]

    def logout(self) -> None:
        """Revoke the token server-side when possible; always clear locally."""
        try:
            if self.session.token:
                self._post("auth/logout")
        except errors.PortalError as e:
            logger.info("Server-side logout failed: %s", e)
        finally:
            self.session.teardown()

    # ── Payments ─────────────────────────────────────────────────────────────

    def submit_payment(self, recipient_email: str, swift_code: str, amount, currency: str,
                       original_amount=None) -> dict:
        body = {
            "recipientEmail": recipient_email,
            "swiftCode": swift_code,
            "amount": str(amount),
            "currency": currency,
        }
        if original_amount is not None:
            body["originalAmount"] = str(original_amount)
        return self._post("payments", body)

    def get_balance(self) -> dict:
        """Returns {balance, currency, transactions}."""
        return self._get("users/me/balance")

    def get_history(self) -> list:
        return self._get("payments/history")

    # ── Admin ────────────────────────────────────────────────────────────────

    def list_pending(self) -> list:
        return self._get("admin/payments/pending")

    def approve_payment(self, transaction_id: str) -> dict:
        return self._post(f"admin/payments/{transaction_id}/approve")

    def reject_payment(self, transaction_id: str) -> dict:
        return self._post(f"admin/payments/{transaction_id}/reject")

    def add_admin(self, name: str, surname: str, id_number: str, email: str, password: str) -> dict:
        return self._post("admin/add-admin", {
            "name": name,
            "surname": surname,
            "idNumber": id_number,
            "email": email,
            "password": password,
        })
