from typing import Any, Dict, List, Tuple

import pytest

from core.config import Settings
from core.errors import RemoteError

ENV = {
    "APPWRITE_ENDPOINT": "https://cloud.example.test/",
    "APPWRITE_PROJECT_ID": "proj1",
    "APPWRITE_API_KEY": "secret-key",
    "APPWRITE_DATABASE_ID": "db1",
    "APPWRITE_USER_COLLECTION_ID": "users",
}


class FakeClient:
    """Stands in for AppwriteClient; records every call in order."""

    def __init__(self, profile=None, user=None, fail: Dict[str, RemoteError] | None = None):
        self.calls: List[Tuple[str, tuple]] = []
        self.profile = profile if profile is not None else {"$id": "p1", "email": "old@example.com", "phone": "5550001"}
        self.user = user if user is not None else {"$id": "a1", "email": "old@example.com"}
        self.fail = fail or {}

    def _hit(self, name: str, *args):
        self.calls.append((name, args))
        if name in self.fail:
            raise self.fail[name]

    def names(self) -> List[str]:
        return [c[0] for c in self.calls]

    def payload(self, name: str) -> Any:
        for n, args in self.calls:
            if n == name:
                return args[-1]
        return None

    def get_document(self, doc_id):
        self._hit("get_document", doc_id)
        return dict(self.profile)

    def get_user(self, account_id):
        self._hit("get_user", account_id)
        return dict(self.user)

    def create_email_session(self, email, password):
        self._hit("create_email_session", email, password)
        return {"$id": "s1", "userId": "a1"}

    def update_user(self, account_id, changes):
        self._hit("update_user", account_id, changes)
        return {"$id": account_id, **changes}

    def update_document(self, doc_id, data):
        self._hit("update_document", doc_id, data)
        return {"$id": doc_id, **data}


@pytest.fixture
def env() -> Dict[str, str]:
    return dict(ENV)


@pytest.fixture
def settings() -> Settings:
    return Settings(endpoint=ENV["APPWRITE_ENDPOINT"], project_id="proj1", api_key="secret-key",
                    database_id="db1", collection_id="users")


@pytest.fixture
def client() -> FakeClient:
    return FakeClient()
