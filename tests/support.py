import unittest
from urllib.parse import urlsplit

import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from payportal.app import create_app
from payportal.extensions import db
from payportal.services.user_service import create_user

PASSWORD = "password123"
BASE_URL = "http://portal.test"


class FlaskAdapter(BaseAdapter):
    """Serves requests made through a requests.Session from a Flask test client."""

    def __init__(self, app):
        super().__init__()
        self.client = app.test_client()

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        url = urlsplit(request.url)
        headers = {
            k: v for k, v in request.headers.items()
            if k.lower() not in ("content-length", "content-type")
        }
        resp = self.client.open(
            url.path,
            method=request.method,
            query_string=url.query,
            headers=headers,
            data=request.body,
            content_type=request.headers.get("Content-Type"),
        )
        response = requests.Response()
        response.status_code = resp.status_code
        response.headers = CaseInsensitiveDict(resp.headers)
        response._content = resp.get_data()
        response.encoding = "utf-8"
        response.reason = resp.status
        response.url = request.url
        response.request = request
        return response

    def close(self):
        pass


class FailingAdapter(BaseAdapter):
    """Raises the given requests exception for every call."""

    def __init__(self, exc):
        super().__init__()
        self.exc = exc
        self.calls = 0

    def send(self, request, **kwargs):
        self.calls += 1
        raise self.exc

    def close(self):
        pass


def http_session(adapter):
    http = requests.Session()
    http.mount(BASE_URL, adapter)
    return http


class PortalTestCase(unittest.TestCase):
    database_uri = "sqlite://"

    def setUp(self):
        self.app = create_app({
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": self.database_uri,
            "JWT_SECRET_KEY": "test-secret-key-that-is-long-enough",
        })
        self.client = self.app.test_client()
        self._id_seq = 0

    def tearDown(self):
        with self.app.app_context():
            db.session.remove()
            db.drop_all()
            db.engine.dispose()

    def next_id_number(self):
        self._id_seq += 1
        return f"{9001015000000 + self._id_seq:013d}"

    def register(self, email, name="Test", surname="User"):
        resp = self.client.post("/auth/register", json={
            "name": name,
            "surname": surname,
            "idNumber": self.next_id_number(),
            "email": email,
            "password": PASSWORD,
        })
        self.assertEqual(resp.status_code, 201, resp.get_json())
        return resp.get_json()["user"]

    def make_admin(self, email):
        with self.app.app_context():
            user = create_user("Admin", "User", self.next_id_number(), email, PASSWORD, role="admin")
            return str(user.user_id)

    def login(self, email):
        resp = self.client.post("/auth/login", json={"email": email, "password": PASSWORD})
        self.assertEqual(resp.status_code, 200, resp.get_json())
        return resp.get_json()["token"]

    def auth(self, token):
        return {"Authorization": f"Bearer {token}"}

    def submit(self, token, recipient_email, amount="1912.00", currency="USD",
               original_amount="100", swift_code="FIRNZAJJ"):
        return self.client.post("/payments", headers=self.auth(token), json={
            "recipientEmail": recipient_email,
            "swiftCode": swift_code,
            "amount": amount,
            "currency": currency,
            "originalAmount": original_amount,
        })
