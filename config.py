"""
Configuration and shared utilities for the Website Audit service.
"""

import logging
import os
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Optional

import yaml
from dotenv import load_dotenv

# Load environment variables - local .env first
load_dotenv()

# Paths
SETTINGS_FILE = Path(os.environ.get("AUDIT_SETTINGS_FILE", "audit_settings.yaml"))
DATA_DIR = Path("data")
REPORTS_DIR = Path("reports")
TEMPLATES_DIR = Path(__file__).parent / "templates_html"

# Worker endpoints (must match the routes exposed by the AI worker)
DEFAULT_RESEARCH_ENDPOINT = "http://127.0.0.1:3000/grok-chat"
DEFAULT_SYNTHESIS_ENDPOINT = "http://127.0.0.1:3000/openai-chat"

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"

# Settings field -> environment variable(s), first non-empty wins
ENV_KEYS = {
    "research_api_key": ("AUDIT_RESEARCH_API_KEY", "XAI_API_KEY"),
    "synthesis_api_key": ("AUDIT_SYNTHESIS_API_KEY", "OPENAI_API_KEY"),
    "research_endpoint": ("AUDIT_RESEARCH_ENDPOINT",),
    "synthesis_endpoint": ("AUDIT_SYNTHESIS_ENDPOINT",),
    "capture_endpoint": ("AUDIT_CAPTURE_ENDPOINT",),
    "research_model": ("AUDIT_RESEARCH_MODEL",),
    "synthesis_model": ("AUDIT_SYNTHESIS_MODEL",),
    "research_timeout": ("AUDIT_RESEARCH_TIMEOUT",),
    "synthesis_timeout": ("AUDIT_SYNTHESIS_TIMEOUT",),
    "capture_timeout": ("AUDIT_CAPTURE_TIMEOUT",),
    "data_dir": ("AUDIT_DATA_DIR",),
    "reports_dir": ("AUDIT_REPORTS_DIR",),
    "log_level": ("AUDIT_LOG_LEVEL",),
}


@dataclass
class Settings:
    """
    Runtime settings for one process.

    Resolution order per field: environment variable, YAML settings file,
    then the defaults below.
    """
    research_api_key: str = ""
    synthesis_api_key: str = ""

    research_endpoint: str = DEFAULT_RESEARCH_ENDPOINT
    synthesis_endpoint: str = DEFAULT_SYNTHESIS_ENDPOINT
    capture_endpoint: str = ""  # Empty = screenshots disabled

    research_model: str = "grok-3-mini-latest"
    synthesis_model: str = "gpt-4.1-mini"

    # Seconds. Research does live crawling; synthesis writes two long documents.
    research_timeout: int = 120
    synthesis_timeout: int = 210
    capture_timeout: int = 120

    data_dir: Path = DATA_DIR
    reports_dir: Path = REPORTS_DIR
    log_level: str = "INFO"

    @property
    def has_any_key(self) -> bool:
        return bool(self.research_api_key or self.synthesis_api_key)


def load_settings_file(path: Optional[Path] = None) -> Dict:
    """Load settings overrides from YAML."""
    path = path or SETTINGS_FILE
    if not path.exists():
        return {}
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping, got {type(data).__name__}")
    return data


def _coerce(field_type, value):
    if field_type is int or field_type == "int":
        return int(value)
    if field_type is Path or field_type == "Path":
        return Path(value)
    return str(value).strip()


def load_settings(path: Optional[Path] = None, environ: Optional[Dict[str, str]] = None) -> Settings:
    """
    Build Settings from the YAML file and environment.

    Unknown YAML keys are ignored.
    """
    environ = os.environ if environ is None else environ
    file_values = load_settings_file(path)
    values = {}

    for f in fields(Settings):
        raw = None
        for env_key in ENV_KEYS.get(f.name, ()):
            if environ.get(env_key, "").strip():
                raw = environ[env_key]
                break
        if raw is None and file_values.get(f.name) not in (None, ""):
            raw = file_values[f.name]
        if raw is not None:
            values[f.name] = _coerce(f.type, raw)

    return Settings(**values)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the cached process settings."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def configure_logging(level="INFO", module_levels: Optional[Dict] = None, silenced: Optional[Dict] = None) -> None:
    """
    Configure the root logger with a single stream handler.

    module_levels: logger name -> level for chattier/quieter modules.
    silenced: logger name -> level for noisy third-party loggers.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO) if isinstance(level, str) else level)
    root.handlers.clear()
    root.addHandler(handler)

    for name, lvl in (module_levels or {}).items():
        logging.getLogger(name).setLevel(getattr(logging, lvl.upper(), logging.INFO) if isinstance(lvl, str) else lvl)

    silenced = {"urllib3": "WARNING"} if silenced is None else silenced
    for name, lvl in silenced.items():
        logging.getLogger(name).setLevel(getattr(logging, lvl.upper(), logging.CRITICAL) if isinstance(lvl, str) else lvl)
