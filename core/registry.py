import json
import importlib
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
import yaml
from jsonschema import validate as jsonschema_validate, ValidationError

from .errors import err_schema, err_internal, err_unsupported_mode

REQUIRED_KEYS = ("name", "version", "engine_api", "actions")

class Registry:
    """Loads handler modules by dotted name (`modules.account.update_login`)."""

    def __init__(self, modules_root: Path | None = None):
        self.modules_root = Path(modules_root or Path(__file__).resolve().parent.parent / "modules")
        self._handlers: Dict[str, Any] = {}
        self._manifests: Dict[str, Dict[str, Any]] = {}
        self._schemas: Dict[Tuple[str, str, str], Dict[str, Any]] = {}  # (module, action, in|out)

    def _module_dir(self, module_name: str) -> Path:
        parts = module_name.split(".")
        if parts[0] != "modules" or len(parts) < 2:
            raise err_schema(f"Unknown module '{module_name}'")
        return self.modules_root.joinpath(*parts[1:])

    def _load_manifest(self, module_name: str) -> Dict[str, Any]:
        if module_name in self._manifests:
            return self._manifests[module_name]
        moddir = self._module_dir(module_name)
        mani_path = moddir / "manifest.yaml"
        if not mani_path.exists():
            raise err_schema(f"Unknown module '{module_name}'")
        mani = yaml.safe_load(mani_path.read_text(encoding="utf-8")) or {}
        for k in REQUIRED_KEYS:
            if k not in mani:
                raise err_internal(f"manifest of {module_name} missing '{k}'")
        if mani["name"] != module_name:
            raise err_internal(f"manifest name mismatch: {mani['name']} != {module_name}")
        for act, spec in mani["actions"].items():
            for key, io in (("input_schema", "in"), ("output_schema", "out")):
                rel = (spec or {}).get(key)
                if rel:
                    self._schemas[(module_name, act, io)] = json.loads((moddir / rel).read_text(encoding="utf-8"))
        self._manifests[module_name] = mani
        return mani

    def get_manifest(self, module_name: str) -> Dict[str, Any]:
        return self._load_manifest(module_name)

    def get_action_spec(self, module_name: str, action: str) -> Optional[Dict[str, Any]]:
        return self._load_manifest(module_name).get("actions", {}).get(action)

    def _load_handler(self, module_name: str):
        if module_name in self._handlers:
            return self._handlers[module_name]
        handler_mod_name = f"{module_name}.handler"
        try:
            mod = importlib.import_module(handler_mod_name)
        except Exception as e:
            raise err_internal(f"Failed to import handler for {module_name}: {e}")
        if not callable(getattr(mod, "run", None)):
            raise err_internal(f"{handler_mod_name} has no 'run' callable")
        self._handlers[module_name] = mod
        return mod

    def _check(self, module_name: str, action: str, io: str, payload: Any):
        sch = self._schemas.get((module_name, action, io))
        if sch is None:
            return
        try:
            jsonschema_validate(payload, sch)
        except ValidationError as ve:
            which = "Input" if io == "in" else "Output"
            raise err_schema(f"{which} schema validation failed", {"error": ve.message})

    async def run(self, module_name: str, envelope: Dict[str, Any], ctx: Optional[Dict[str, Any]] = None,
                  env: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        mani = self._load_manifest(module_name)
        handler = self._load_handler(module_name)

        action = envelope.get("action")
        mode = envelope.get("mode", "SINGLE")
        if action not in mani["actions"]:
            raise err_schema(f"Unknown action '{action}' for {module_name}")
        if mode not in (mani["actions"][action] or {}).get("modes", ["SINGLE"]):
            raise err_unsupported_mode(f"Action '{action}' does not support mode '{mode}' for {module_name}")

        self._check(module_name, action, "in", envelope.get("input") or {})
        result = await handler.run(envelope, ctx=ctx, env=env)
        if result.get("ok") and "data" in result:
            self._check(module_name, action, "out", result["data"])
        return result
