from typing import Any, Optional, Dict, List

class FrameworkError(Exception):
    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None, http_status: int = 400):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.http_status = http_status

class ConfigurationError(FrameworkError):
    def __init__(self, missing: List[str], invalid: Optional[List[str]] = None):
        details: Dict[str, Any] = {"missing": list(missing)}
        if invalid:
            details["invalid"] = list(invalid)
        msg = "Missing environment variables" if missing else "Invalid environment variables"
        super().__init__("ERR_CONFIG", msg, details, 500)
        self.missing = list(missing)
        self.invalid = list(invalid or [])

class ValidationError(FrameworkError):
    def __init__(self, msg: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("ERR_SCHEMA", msg, details, 400)

class AuthorizationError(FrameworkError):
    def __init__(self, msg: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("ERR_FORBIDDEN", msg, details, 403)

class RemoteError(FrameworkError):
    """Non-2xx answer from the backend. `body` is the parsed JSON or None."""
    def __init__(self, status: int, body: Any = None, url: str = ""):
        super().__init__("ERR_REMOTE", f"Remote call failed with status {status}",
                         {"status": status, "url": url}, status if 400 <= status < 600 else 502)
        self.status = status
        self.body = body

    @property
    def detail(self) -> Any:
        # body when the backend sent one, bare status otherwise
        return self.body if self.body is not None else self.status

def err_schema(msg: str, details: Optional[Dict[str, Any]] = None) -> FrameworkError:
    return ValidationError(msg, details)

def err_forbidden(msg: str, details: Optional[Dict[str, Any]] = None) -> FrameworkError:
    return AuthorizationError(msg, details)

def err_unsupported_mode(msg: str, details: Optional[Dict[str, Any]] = None) -> FrameworkError:
    return FrameworkError("ERR_UNSUPPORTED_MODE", msg, details, 400)

def err_internal(msg: str, details: Optional[Dict[str, Any]] = None) -> FrameworkError:
    return FrameworkError("ERR_INTERNAL", msg, details, 500)
