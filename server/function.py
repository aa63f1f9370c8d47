#!/usr/bin/env python
"""
Serverless entry for UPDATE_LOGIN.

Runtimes that pass a context object call `main(context)`; the result goes to
`context.res.json(...)` when present, otherwise one JSON line on stdout.
Run directly (`python -m server.function`) the payload comes from
APPWRITE_FUNCTION_DATA / APPWRITE_FUNCTION_PAYLOAD or stdin.
"""
import json
import sys
from typing import Any, Dict, Optional, Tuple

from loguru import logger

from core.config import Settings, load_settings
from core.errors import ConfigurationError
from core.logger import setup_logger
from core.payload import resolve_payload
from modules.account._appwrite import AppwriteClient
from modules.account.update_login.handler import update_login

def _emit(out: Dict[str, Any], context: Any = None, stream=None):
    res = getattr(context, "res", None) if context is not None else None
    if res is not None and callable(getattr(res, "json", None)):
        return res.json(out)
    stream = stream or sys.stdout
    stream.write(json.dumps(out, ensure_ascii=False) + "\n")
    stream.flush()
    return out

def invoke(context: Any = None, *, settings: Optional[Settings] = None, client: Optional[AppwriteClient] = None,
           environ=None, stdin=None) -> Tuple[Dict[str, Any], int]:
    """Resolve and run; returns (output, exit code) without emitting."""
    if settings is None:
        try:
            settings = load_settings(environ)
        except ConfigurationError as ce:
            setup_logger()
            logger.error("Bad configuration: missing={} invalid={}", ce.missing, ce.invalid)
            return {"ok": False, "message": ce.message, "detail": ce.details}, 1
        setup_logger(settings.log_level)
    try:
        payload = resolve_payload(context, environ=environ, stdin=stdin)
        return update_login(payload, settings, client).to_output(), 0
    except Exception as e:
        logger.exception("Unhandled error in function")
        return {"ok": False, "message": str(e)}, 0

def main(context: Any = None, *, environ=None, stdin=None, stream=None):
    out, _ = invoke(context, environ=environ, stdin=stdin)
    return _emit(out, context, stream)

def cli(environ=None, stdin=None, stream=None) -> int:
    out, code = invoke(None, environ=environ, stdin=stdin)
    _emit(out, None, stream)
    return code

if __name__ == "__main__":
    sys.exit(cli())
