from __future__ import annotations
import logging, os, sys
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import urlsplit

import yaml

from pdalarm.errors import ConfigurationError, InvalidFieldFormat, MissingRequiredField

log = logging.getLogger(__name__)

CK_SERVICE_KEY         = "service_key"
CK_CUSTOM_INCIDENT_KEY = "use_custom_incident_key"
CK_INCIDENT_KEY_PREFIX = "incident_key_prefix"
CK_CLIENT              = "client"
CK_CLIENT_URL          = "client_url"

SERVICE_KEY_LENGTH = 32
EVENTS_API_URL     = "https://events.pagerduty.com/generic/2010-04-15/create_event.json"

CALLBACK_DEFAULTS: Dict[str, Any] = {
    CK_SERVICE_KEY: "", CK_CUSTOM_INCIDENT_KEY: True, CK_INCIDENT_KEY_PREFIX: "Graylog2/",
    CK_CLIENT: "Graylog2", CK_CLIENT_URL: "",
}

DEFAULTS: Dict[str, Any] = {
    "log_level": "INFO", "log_file": "",
    "transport": {"url": EVENTS_API_URL, "timeout": 10},
    "callback":  dict(CALLBACK_DEFAULTS),
}

_TRUE  = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}

def _string_is_set(value: Any) -> bool:
    return value is not None and str(value) != ""

def _as_bool(name: str, value: Any, default: bool) -> bool:
    if isinstance(value, bool): return value
    text = "" if value is None else str(value).strip().lower()
    if not text: return default
    if text in _TRUE:  return True
    if text in _FALSE: return False
    raise InvalidFieldFormat(name, f"{name} must be a boolean.")

def _check_service_key(config: Mapping[str, Any]) -> None:
    key = config.get(CK_SERVICE_KEY)
    if not _string_is_set(key):
        raise MissingRequiredField(CK_SERVICE_KEY, f"{CK_SERVICE_KEY} is mandatory and must not be null or empty.")
    if not isinstance(key, str):
        raise InvalidFieldFormat(CK_SERVICE_KEY, f"{CK_SERVICE_KEY} must be a string.")
    if len(key) != SERVICE_KEY_LENGTH:
        raise InvalidFieldFormat(CK_SERVICE_KEY, f"{CK_SERVICE_KEY} must be {SERVICE_KEY_LENGTH} characters long.")

def _check_client_url(config: Mapping[str, Any]) -> None:
    url = config.get(CK_CLIENT_URL)
    if not _string_is_set(url): return
    url = str(url)
    try:
        if any(c.isspace() for c in url): raise ValueError("whitespace in URL")
        parts = urlsplit(url)
        parts.port  # raises on a malformed port
        if parts.scheme in ("http", "https") and not parts.netloc: raise ValueError("missing authority")
    except ValueError as e:
        raise InvalidFieldFormat(CK_CLIENT_URL, f"Couldn't parse {CK_CLIENT_URL} correctly.") from e
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise InvalidFieldFormat(CK_CLIENT_URL, f"{CK_CLIENT_URL} must be a valid HTTP or HTTPS URL.")

def _check_incident_key_flag(config: Mapping[str, Any]) -> None:
    _as_bool(CK_CUSTOM_INCIDENT_KEY, config.get(CK_CUSTOM_INCIDENT_KEY), True)

_RULES = (_check_service_key, _check_client_url, _check_incident_key_flag)

def validate(config: Mapping[str, Any]) -> None:
    """Raise the first ConfigurationError found in a raw option mapping."""
    for rule in _RULES:
        rule(config)

def collect_errors(config: Mapping[str, Any]) -> List[ConfigurationError]:
    """Run every rule independently and return all failures, in rule order."""
    errors: List[ConfigurationError] = []
    for rule in _RULES:
        try: rule(config)
        except ConfigurationError as e: errors.append(e)
    return errors

@dataclass(frozen=True)
class CallbackConfig:
    service_key:             str
    use_custom_incident_key: bool = True
    incident_key_prefix:     str  = "Graylog2/"
    client:                  str  = "Graylog2"
    client_url:              str  = ""

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "CallbackConfig":
        validate(raw)
        opt = lambda k: str(raw[k]) if raw.get(k) is not None else CALLBACK_DEFAULTS[k]
        return cls(service_key=raw[CK_SERVICE_KEY],
                   use_custom_incident_key=_as_bool(CK_CUSTOM_INCIDENT_KEY, raw.get(CK_CUSTOM_INCIDENT_KEY), True),
                   incident_key_prefix=opt(CK_INCIDENT_KEY_PREFIX),
                   client=opt(CK_CLIENT),
                   client_url=opt(CK_CLIENT_URL))

def freeze(raw: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(raw or {}))

def default_config_paths() -> List[Path]:
    paths = []
    env = os.environ.get("PDALARM_CONFIG")
    if env: paths.append(Path(env))
    paths.append(Path("pdalarm.yaml"))
    paths.append(Path.home() / ".config" / "pdalarm" / "pdalarm.yaml")
    paths.append(Path("/etc/pdalarm/pdalarm.yaml"))
    return paths

def find_config() -> Optional[Path]:
    for p in default_config_paths():
        if p.exists():
            return p
    return None

def deep_merge(base: Dict, override: Dict) -> Dict:
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = deep_merge(result[k], v)
        else:
            result[k] = v
    return result

def load_config(path: Optional[str] = None) -> Dict:
    if path:
        config_path = Path(path)
        if not config_path.exists():
            log.error(f"Config not found: {path}"); sys.exit(1)
    else:
        config_path = find_config()
        if not config_path:
            log.warning("No config found. Using defaults. Run: pdalarm --init")
            return deep_merge(DEFAULTS, {})
    try:
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        log.error(f"Failed to parse {config_path}: {e}"); sys.exit(1)
    if not isinstance(raw, dict):
        log.error(f"Failed to parse {config_path}: top level must be a mapping"); sys.exit(1)
    return deep_merge(DEFAULTS, raw)

def cfg_get(d: Dict, *keys: str, default: Any = None) -> Any:
    for k in keys:
        if not isinstance(d, dict): return default
        d = d.get(k)
        if d is None: return default
    return d
