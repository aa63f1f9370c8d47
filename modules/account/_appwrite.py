"""
Thin REST client for the backend platform (users, sessions, documents).
Every non-2xx answer raises RemoteError carrying the status and parsed body.
"""
from typing import Any, Dict, Optional
from urllib.parse import quote
import requests

from core.config import Settings
from core.errors import RemoteError

def _seg(v: str) -> str:
    return quote(str(v), safe="")

class AppwriteClient:
    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()

    def _headers(self, admin: bool = True) -> Dict[str, str]:
        h = {
            "Content-Type": "application/json",
            "X-Appwrite-Project": self.settings.project_id,
        }
        if admin:
            h["X-Appwrite-Key"] = self.settings.api_key
        return h

    def _call(self, method: str, path: str, body: Optional[Dict[str, Any]] = None, *, admin: bool = True) -> Any:
        url = self.settings.base_url + path
        r = self.session.request(method, url, headers=self._headers(admin), json=body,
                                 timeout=self.settings.request_timeout)
        try:
            js = r.json()
        except ValueError:
            js = None
        if not r.ok:
            raise RemoteError(r.status_code, js, url)
        return js

    # ---------- users ----------
    def get_user(self, account_id: str) -> Dict[str, Any]:
        return self._call("GET", f"/v1/users/{_seg(account_id)}")

    def update_user(self, account_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self._call("PUT", f"/v1/users/{_seg(account_id)}", changes)

    # ---------- sessions ----------
    def create_email_session(self, email: str, password: str) -> Dict[str, Any]:
        # client-side endpoint: no API key, the credentials are the proof
        return self._call("POST", "/v1/account/sessions/email",
                          {"email": email, "password": password}, admin=False)

    # ---------- documents ----------
    def _doc_path(self, doc_id: str) -> str:
        s = self.settings
        return (f"/v1/databases/{_seg(s.database_id)}/collections/{_seg(s.collection_id)}"
                f"/documents/{_seg(doc_id)}")

    def get_document(self, doc_id: str) -> Dict[str, Any]:
        return self._call("GET", self._doc_path(doc_id))

    def update_document(self, doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._call("PATCH", self._doc_path(doc_id), {"data": data})
