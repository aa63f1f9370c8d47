#!/usr/bin/env python
"""
CLI: quick diagnostics for dependencies and function configuration
Usage:
    python -m tools.diag_env
    python -m tools.diag_env --probe     # also GET the configured profile collection endpoint
"""
import sys, os, importlib, traceback, platform, json, argparse

from core.config import ENV_ALIASES, load_settings
from core.errors import ConfigurationError
from core.payload import ENV_PAYLOAD_VARS

DEPS = ["requests", "pydantic", "yaml", "jsonschema", "loguru", "fastapi"]

def _mask(v: str) -> str:
    return v[:4] + "****" if len(v) > 4 else "****"

def status(environ=None):
    env = os.environ if environ is None else environ
    out = {
        "python": sys.version,
        "platform": platform.platform(),
        "executable": sys.executable,
    }
    for mod in DEPS:
        try:
            m = importlib.import_module(mod)
            out[mod] = {"present": True, "version": getattr(m, "__version__", None)}
        except Exception:
            out[mod] = {"present": False, "traceback": traceback.format_exc()}
    cfg = {}
    for field, names in ENV_ALIASES.items():
        hit = next((n for n in names if (env.get(n) or "").strip()), None)
        cfg[field] = {"source": hit, "value": _mask(env[hit]) if hit and field == "api_key" else (env.get(hit) if hit else None)}
    out["config"] = cfg
    out["payload_vars"] = {n: bool(env.get(n)) for n in ENV_PAYLOAD_VARS}
    try:
        load_settings(env)
        out["config_ok"] = True
    except ConfigurationError as ce:
        out["config_ok"] = False
        out["missing"] = ce.missing
    return out

def probe(environ=None):
    import requests
    s = load_settings(environ)
    url = f"{s.base_url}/v1/databases/{s.database_id}/collections/{s.collection_id}"
    try:
        r = requests.get(url, headers={"X-Appwrite-Project": s.project_id, "X-Appwrite-Key": s.api_key},
                         timeout=s.request_timeout or 10)
        return {"url": url, "status": r.status_code}
    except requests.RequestException as e:
        return {"url": url, "error": str(e)}

def main(argv=None):
    p = argparse.ArgumentParser()
    p.add_argument("--probe", action="store_true")
    args = p.parse_args(argv)
    report = status()
    print(json.dumps(report, ensure_ascii=False, indent=2))
    if args.probe and report.get("config_ok"):
        print(json.dumps(probe(), ensure_ascii=False, indent=2))
    return 0 if report.get("config_ok") else 1

if __name__ == "__main__":
    sys.exit(main())
