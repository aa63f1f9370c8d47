"""
UPDATE_LOGIN: change a user's login identifier, name and password on the
auth record, then mirror phone/email/name onto the profile document.

Order: validate -> verify current password (optional) -> update auth user ->
update profile document. The first failure short-circuits. A profile failure
after a successful auth update is reported together with the updated account;
the auth change is not reverted.
"""
from typing import Any, Dict, Optional

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from core.config import Settings, get_settings
from core.contract import UpdateRequest, UpdateResult
from core.errors import FrameworkError, ConfigurationError, RemoteError, err_forbidden, err_schema
from modules.account._appwrite import AppwriteClient
from modules.account._identity import build_login_identifier, identifier_from_profile, phone_digits

ACTION = "UPDATE_LOGIN"

def _clean(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None

def wants_verification(req: UpdateRequest) -> bool:
    if req.verify_current_password is not None:
        return req.verify_current_password
    return req.current_password is not None

def account_changes(req: UpdateRequest) -> Dict[str, Any]:
    body: Dict[str, Any] = {}
    ident = build_login_identifier(req.new_phone, req.new_email)
    if ident:
        body["email"] = ident
    if req.new_password is not None and req.new_password.strip():
        body["password"] = req.new_password
    name = _clean(req.name)
    if name:
        body["name"] = name
    return body

def profile_changes(req: UpdateRequest) -> Dict[str, Any]:
    # the profile keeps the raw contact fields; only the login identifier is derived
    body: Dict[str, Any] = {}
    digits = phone_digits(req.new_phone)
    if digits:
        body["phone"] = digits
    email = _clean(req.new_email)
    if email:
        body["email"] = email
    name = _clean(req.name)
    if name:
        body["name"] = name
    return body

def current_identifier(client: AppwriteClient, req: UpdateRequest) -> Optional[str]:
    try:
        ident = identifier_from_profile(client.get_document(req.profile_id))
    except RemoteError as e:
        logger.warning("Profile lookup for verification failed: {} {}", e.status, e.body)
        ident = None
    if ident:
        return ident
    try:
        user = client.get_user(req.account_id) or {}
    except RemoteError as e:
        logger.warning("Account lookup for verification failed: {} {}", e.status, e.body)
        return None
    return _clean(user.get("email"))

def verify_password(client: AppwriteClient, req: UpdateRequest) -> None:
    if req.current_password is None:
        raise err_schema("currentPassword required to verify the current password")
    ident = current_identifier(client, req)
    if not ident:
        raise err_forbidden("Cannot resolve current login identifier")
    try:
        # the created session is discarded
        client.create_email_session(ident, req.current_password)
    except RemoteError as e:
        logger.warning("Password verification failed: {} {}", e.status, e.body)
        raise err_forbidden("Current password is incorrect", {"status": e.status})

def update_login(payload: Dict[str, Any], settings: Settings, client: Optional[AppwriteClient] = None) -> UpdateResult:
    try:
        req = UpdateRequest.model_validate(payload or {})
    except PydanticValidationError as e:
        return UpdateResult(ok=False, message="Invalid payload", detail=e.errors(include_url=False))

    if not req.profile_id or not req.account_id:
        return UpdateResult(ok=False, message="profileId and accountId required")

    client = client or AppwriteClient(settings)
    account = None
    try:
        if wants_verification(req):
            verify_password(client, req)

        changes = account_changes(req)
        if changes:
            try:
                account = client.update_user(req.account_id, changes)
            except RemoteError as e:
                logger.error("Account update failed: {} {}", e.status, e.body)
                return UpdateResult(ok=False, message="Failed to update account", detail=e.detail)

        profile = None
        fields = profile_changes(req)
        if fields:
            try:
                profile = client.update_document(req.profile_id, fields)
            except RemoteError as e:
                logger.error("Profile update failed: {} {}", e.status, e.body)
                return UpdateResult(ok=False, message="Failed to update profile document",
                                    detail=e.detail, account=account)

        logger.info("login updated for account {} (auth={}, profile={})",
                    req.account_id, sorted(changes), sorted(fields))
        return UpdateResult(ok=True, account=account, profile=profile)
    except FrameworkError as fe:
        detail = fe.details or None
        if isinstance(fe, RemoteError):
            detail = fe.detail
        return UpdateResult(ok=False, message=fe.message, detail=detail, account=account)
    except Exception as e:
        logger.exception("Unhandled error in function")
        return UpdateResult(ok=False, message=str(e), account=account)

async def run(envelope: Dict[str, Any], ctx=None, env=None) -> Dict[str, Any]:
    act = envelope.get("action")
    if act != ACTION:
        return {"ok": False, "mode":"SINGLE", "error":{"code":"ERR_SCHEMA","message":"unsupported action"}}

    settings = (env or {}).get("settings")
    if settings is None:
        try:
            settings = get_settings()
        except ConfigurationError as ce:
            return {"ok": False, "mode":"SINGLE", "error":{"code": ce.code, "message": ce.message, "details": ce.details}}
    client = (env or {}).get("client")

    result = update_login(envelope.get("input") or {}, settings, client)
    if result.ok:
        return {"ok": True, "mode":"SINGLE", "data": result.to_output()}
    return {"ok": False, "mode":"SINGLE",
            "error":{"code":"ERR_UPDATE_LOGIN","message": result.message, "details": result.to_output()}}
