"""
Client configuration, read from the environment (or a .env file).

PAYPORTAL_API_URL       base URL of the portal API
PAYPORTAL_SESSION_FILE  where the token and role are kept between runs
PAYPORTAL_TIMEOUT       seconds to wait for any single request
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

DEFAULT_API_URL = "http://127.0.0.1:5000"
DEFAULT_SESSION_FILE = os.path.join(os.path.expanduser("~"), ".payportal_session.json")
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class ClientConfig:
    api_url: str = DEFAULT_API_URL
    session_file: str = DEFAULT_SESSION_FILE
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls):
        load_dotenv()
        return cls(
            api_url=os.environ.get("PAYPORTAL_API_URL", DEFAULT_API_URL),
            session_file=os.environ.get("PAYPORTAL_SESSION_FILE", DEFAULT_SESSION_FILE),
            timeout=float(os.environ.get("PAYPORTAL_TIMEOUT", DEFAULT_TIMEOUT)),
        )
