import os
import sys
from typing import Optional, Dict
from pydantic import BaseModel, Field, ConfigDict, field_validator


_ENV_LOADED = False

def _load_env_file(path: str, allow_override: bool = False) -> None:
    """
    Minimal .env loader: loads KEY=VALUE pairs into os.environ.
    - Ignores empty lines and lines starting with '#'
    - Supports values wrapped in single or double quotes
    - By default, does not override existing environment variables
    """
    if not path or not os.path.exists(path):
        return
    try:
        with open(path, "r", encoding="utf-8") as f:
            for raw_line in f:
                line = raw_line.strip()
                if not line or line.startswith("#"):
                    continue
                if line.startswith("export "):
                    line = line[len("export "):].strip()
                if "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip()
                if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
                    value = value[1:-1]
                if allow_override or key not in os.environ:
                    os.environ[key] = value
    except PermissionError as e:
        print(f"FATAL: Permission denied reading environment file {path}: {e}", file=sys.stderr)
        raise

def load_env_if_present(force_reload: bool = False) -> None:
    """
    Load environment variables from .env files in order of precedence:
    1. S3LOADER_ENV_FILE, when set (only that file is read)
    2. .env.local
    3. .env
    """
    global _ENV_LOADED
    if _ENV_LOADED and not force_reload:
        return

    custom = os.environ.get("S3LOADER_ENV_FILE")
    if custom:
        _load_env_file(custom, allow_override=False)
    else:
        for env_file in ('.env.local', '.env'):
            _load_env_file(env_file, allow_override=False)

    _ENV_LOADED = True


class LoaderSettings(BaseModel):
    """
    Artifact loader settings from environment variables.
    """
    model_config = ConfigDict(validate_assignment=True, populate_by_name=True)

    raw_env: Dict[str, str] = Field(default_factory=dict, exclude=True)

    # Store addressing
    bucket: Optional[str] = Field(None, alias="S3LOADER_BUCKET")
    requester_pays: bool = Field(False, alias="S3LOADER_REQUESTER_PAYS")
    artifact_suffix: str = Field(".class", alias="S3LOADER_ARTIFACT_SUFFIX")

    # Client construction
    region: Optional[str] = Field(None, alias="S3LOADER_REGION")
    endpoint_url: Optional[str] = Field(None, alias="S3LOADER_ENDPOINT_URL")
    connect_timeout: float = Field(10.0, alias="S3LOADER_CONNECT_TIMEOUT")
    read_timeout: float = Field(60.0, alias="S3LOADER_READ_TIMEOUT")
    # Transport-level attempts made by botocore; the loader itself never retries
    max_attempts: int = Field(1, alias="S3LOADER_MAX_ATTEMPTS")

    @field_validator('bucket', 'region', 'endpoint_url', mode='before')
    def blank_to_none(cls, v):
        if v is None:
            return None
        if not isinstance(v, str):
            raise ValueError("Expected string value")
        v = v.strip()
        return v or None

    @field_validator('requester_pays', mode='before')
    def coerce_bool(cls, v):
        if isinstance(v, bool):
            return v
        if not isinstance(v, str):
            raise ValueError("Expected string for boolean field")
        val = v.strip().lower()
        if val in ("true", "1", "yes", "y", "on"):
            return True
        if val in ("false", "0", "no", "n", "off", ""):
            return False
        raise ValueError(f"Invalid boolean value: {v}")

    @field_validator('connect_timeout', 'read_timeout', mode='before')
    def coerce_float(cls, v):
        if isinstance(v, (int, float)):
            v = float(v)
        elif isinstance(v, str):
            v = float(v.strip())
        else:
            raise ValueError("Expected float-compatible value")
        if v <= 0:
            raise ValueError("Timeout must be positive")
        return v

    @field_validator('max_attempts', mode='before')
    def coerce_int(cls, v):
        if isinstance(v, str):
            v = int(v.strip())
        if not isinstance(v, int):
            raise ValueError("Expected integer-compatible value")
        if v < 1:
            raise ValueError("S3LOADER_MAX_ATTEMPTS must be >= 1")
        return v

    @field_validator('artifact_suffix', mode='before')
    def validate_suffix(cls, v):
        if v is None:
            return ".class"
        return str(v).strip()

    def require_bucket(self) -> str:
        if not self.bucket:
            raise ValueError("S3LOADER_BUCKET is required to resolve artifacts from a fixed bucket")
        return self.bucket


_loader_settings: Optional[LoaderSettings] = None

def get_loader_settings(reload: bool = False) -> LoaderSettings:
    """
    Retrieve loader settings. Reads .env files on first call;
    set reload=True to rebuild from the current environment.
    """
    global _loader_settings
    if _loader_settings is None or reload:
        load_env_if_present(force_reload=reload)
        env = os.environ
        _loader_settings = LoaderSettings(
            raw_env=dict(env),
            S3LOADER_BUCKET=env.get('S3LOADER_BUCKET'),
            S3LOADER_REQUESTER_PAYS=env.get('S3LOADER_REQUESTER_PAYS', 'false'),
            S3LOADER_ARTIFACT_SUFFIX=env.get('S3LOADER_ARTIFACT_SUFFIX', '.class'),
            S3LOADER_REGION=env.get('S3LOADER_REGION') or env.get('AWS_REGION'),
            S3LOADER_ENDPOINT_URL=env.get('S3LOADER_ENDPOINT_URL'),
            S3LOADER_CONNECT_TIMEOUT=env.get('S3LOADER_CONNECT_TIMEOUT', '10'),
            S3LOADER_READ_TIMEOUT=env.get('S3LOADER_READ_TIMEOUT', '60'),
            S3LOADER_MAX_ATTEMPTS=env.get('S3LOADER_MAX_ATTEMPTS', '1'),
        )
    return _loader_settings
