"""
Payload resolution for serverless invocations.

Runtimes hand the caller's JSON over in different ways: a structured object on
the invocation context, an environment variable, or stdin. Some wrap it again
(`{"body": "..."}`, form-encoded `body=%7B...%7D`, a JSON string holding JSON).
`resolve_payload` walks an ordered list of source strategies and returns the
first non-empty mapping, or `{}`. It never raises.

Adding a convention means appending a strategy: a callable taking `Sources`
and returning the raw value it found (or None).
"""
import json
import os
import sys
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional
from urllib.parse import parse_qs

from loguru import logger

ENV_PAYLOAD_VARS = ("APPWRITE_FUNCTION_DATA", "APPWRITE_FUNCTION_PAYLOAD")
WRAPPER_KEYS = ("body", "payload", "data")
REQUEST_KEYS = ("profileId", "accountId")
STDIN_TIMEOUT = 0.25
MAX_DEPTH = 4

@dataclass
class Sources:
    runtime: Any = None
    environ: Mapping[str, str] = field(default_factory=lambda: os.environ)
    stdin: Any = None
    timeout: float = STDIN_TIMEOUT

Strategy = Callable[[Sources], Any]

# ---------- decoding ----------

def _from_urlencoded(text: str) -> Any:
    if "=" not in text or text.lstrip().startswith(("{", "[", '"')):
        return None
    try:
        form = parse_qs(text, strict_parsing=True)
    except ValueError:
        return None
    for k in WRAPPER_KEYS:
        if form.get(k):
            return form[k][0]
    return None

def _is_request(d: Dict[str, Any]) -> bool:
    return any(k in d for k in REQUEST_KEYS)

def decode(raw: Any, depth: int = 0) -> Dict[str, Any]:
    """Turn whatever a source produced into a dict; `{}` when nothing usable."""
    if raw is None or depth > MAX_DEPTH:
        return {}
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return {}
        try:
            parsed = json.loads(text)
        except ValueError:
            inner = _from_urlencoded(text)
            return decode(inner, depth + 1) if inner is not None else {}
        if isinstance(parsed, str):
            # doubly-encoded: '"{\"profileId\": ...}"'
            return decode(parsed, depth + 1)
        return decode(parsed, depth + 1) if isinstance(parsed, dict) else {}
    if isinstance(raw, Mapping):
        d = dict(raw)
        if not _is_request(d):
            for k in WRAPPER_KEYS:
                if k in d and d[k] not in (None, "", {}):
                    inner = decode(d[k], depth + 1)
                    if inner:
                        return inner
        return d
    return {}

# ---------- strategies ----------

def _attr(obj: Any, *names: str) -> Any:
    for n in names:
        try:
            # runtime request objects parse lazily and raise on bodies they cannot read
            v = obj.get(n) if isinstance(obj, Mapping) else getattr(obj, n, None)
        except Exception:
            continue
        if v not in (None, "", b"", {}):
            return v
    return None

def from_runtime(src: Sources) -> Any:
    """Structured payload handed over by the runtime (dict, `req.body`, `payload`)."""
    rt = src.runtime
    if rt is None:
        return None
    if isinstance(rt, (str, bytes, bytearray)):
        return rt
    if isinstance(rt, Mapping) and _is_request(rt):
        return rt
    req = _attr(rt, "req")
    if req is not None:
        v = _attr(req, "bodyJson", "body_json", "body", "bodyRaw", "body_raw", "bodyText", "body_text")
        if v is not None:
            return v
    v = _attr(rt, "payload", "body", "data")
    if v is not None:
        return v
    return rt if isinstance(rt, Mapping) and rt else None

def from_environ(src: Sources) -> Any:
    for name in ENV_PAYLOAD_VARS:
        v = src.environ.get(name)
        if v:
            return v
    return None

def from_stdin(src: Sources) -> Any:
    stream = src.stdin if src.stdin is not None else sys.stdin
    if stream is None:
        return None
    try:
        if stream.isatty():
            return None
    except (AttributeError, ValueError):
        pass
    box: List[str] = []

    def _read():
        try:
            box.append(stream.read())
        except (OSError, ValueError):
            pass

    t = threading.Thread(target=_read, daemon=True)
    t.start()
    t.join(src.timeout)
    if t.is_alive():
        logger.debug("no stdin within {}s", src.timeout)
        return None
    return box[0] if box else None

STRATEGIES: List[Strategy] = [from_runtime, from_environ, from_stdin]

def resolve_payload(runtime: Any = None, *, environ: Optional[Mapping[str, str]] = None,
                    stdin: Any = None, timeout: float = STDIN_TIMEOUT,
                    strategies: Optional[List[Strategy]] = None) -> Dict[str, Any]:
    src = Sources(runtime=runtime, environ=os.environ if environ is None else environ,
                  stdin=stdin, timeout=timeout)
    for strategy in (strategies if strategies is not None else STRATEGIES):
        try:
            raw = strategy(src)
        except Exception as e:
            logger.debug("payload strategy {} failed: {}", getattr(strategy, "__name__", strategy), e)
            continue
        data = decode(raw)
        if data:
            logger.debug("payload resolved via {}", getattr(strategy, "__name__", strategy))
            return data
    return {}
