from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from core.registry import Registry
from core.contract import InEnvelope, ErrorObj
from core.errors import FrameworkError, err_schema
from core.config import get_settings
from core.payload import resolve_payload, from_runtime
from modules.account.update_login.handler import update_login

app = FastAPI(title="update-login API", version="1.0.0")

registry = Registry()

def _error(status: int, code: str, message: str, details=None) -> JSONResponse:
    err = ErrorObj(code=code, message=message, details=details or None)
    return JSONResponse(status_code=status, content={"ok": False, "error": err.model_dump()})

@app.get("/health")
async def health():
    return {"ok": True}

@app.post("/run")
async def run(request: Request, name: str):
    try:
        try:
            envelope = InEnvelope.model_validate(await request.json())
        except (PydanticValidationError, ValueError) as ve:
            raise err_schema("Invalid envelope", {"error": str(ve)})
        ctx = {"request_id": envelope.request_id or request.headers.get("X-Request-ID")}
        out = await registry.run(name, envelope.model_dump(exclude_none=True), ctx=ctx)
        return JSONResponse(out)
    except FrameworkError as fe:
        return _error(fe.http_status, fe.code, fe.message, fe.details)
    except Exception as e:
        logger.exception("run failed")
        return _error(500, "ERR_INTERNAL", str(e))

@app.post("/functions/update-login")
async def update_login_raw(request: Request):
    """Function-style call: any body shape the payload resolver understands."""
    raw = await request.body()
    try:
        settings = get_settings()
    except FrameworkError as fe:
        return JSONResponse(status_code=fe.http_status,
                            content={"ok": False, "message": fe.message, "detail": fe.details})
    payload = resolve_payload(raw, environ={}, strategies=[from_runtime])
    return JSONResponse(update_login(payload, settings).to_output())
