import os
from functools import lru_cache
from typing import Mapping, Optional, Tuple, Dict
from pydantic import BaseModel

from .errors import ConfigurationError

# field -> env names, first non-empty wins
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "endpoint": ("APPWRITE_ENDPOINT", "APPWRITE_FUNCTION_ENDPOINT"),
    "project_id": ("APPWRITE_PROJECT_ID", "APPWRITE_PROJECT"),
    "api_key": ("APPWRITE_API_KEY",),
    "database_id": ("APPWRITE_DATABASE_ID", "APPWRITE_DATABASE"),
    "collection_id": ("APPWRITE_USER_COLLECTION_ID", "APPWRITE_COLLECTION_ID"),
}

class Settings(BaseModel):
    """Process-wide configuration, read once at cold start."""
    model_config = {"frozen": True}

    endpoint: str
    project_id: str
    api_key: str
    database_id: str
    collection_id: str
    log_level: str = "INFO"
    request_timeout: Optional[float] = None  # outbound calls wait forever unless set

    @property
    def base_url(self) -> str:
        return self.endpoint.rstrip("/")

def _first(env: Mapping[str, str], names: Tuple[str, ...]) -> Optional[str]:
    for n in names:
        v = (env.get(n) or "").strip()
        if v:
            return v
    return None

def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    values = {}
    missing = []
    for field, names in ENV_ALIASES.items():
        v = _first(env, names)
        if v is None:
            missing.append(names[0])
        else:
            values[field] = v
    if missing:
        raise ConfigurationError(missing)
    values["log_level"] = (env.get("LOG_LEVEL") or "INFO").strip().upper()
    timeout = (env.get("APPWRITE_REQUEST_TIMEOUT") or "").strip()
    if timeout:
        try:
            values["request_timeout"] = float(timeout)
        except ValueError:
            raise ConfigurationError([], ["APPWRITE_REQUEST_TIMEOUT"])
    return Settings(**values)

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
