import logging
import os
from dataclasses import dataclass
import streamlit as st
from dateutil import tz as dateutil_tz


class MissingConfigError(RuntimeError):
    pass


def _get_nested_secret(secrets, section: str, key: str):
    try:
        return secrets[section][key]
    except Exception:
        return None


def _get_secret(secrets, key: str):
    try:
        return secrets[key]
    except Exception:
        return None


@dataclass(frozen=True)
class Settings:
    supabase_url: str
    supabase_key: str
    timezone: str | None = None
    fetch_window_days: int = 30
    billing_period_days: int = 30
    rate_per_minute: float = 0.50
    log_level: str = "INFO"

    @property
    def display_tz(self):
        """Configured display time zone, else the server's local one."""
        if self.timezone:
            return self.timezone
        return dateutil_tz.tzlocal()


def _resolve_supabase_config(secrets, environ):
    url = (
        _get_nested_secret(secrets, "supabase", "url")
        or _get_secret(secrets, "SUPABASE_URL")
        or _get_secret(secrets, "supabase_url")
        or environ.get("SUPABASE_URL")
    )
    key = (
        _get_nested_secret(secrets, "supabase", "key")
        or _get_secret(secrets, "SUPABASE_KEY")
        or _get_secret(secrets, "SUPABASE_ANON_KEY")
        or _get_secret(secrets, "supabase_key")
        or environ.get("SUPABASE_KEY")
        or environ.get("SUPABASE_ANON_KEY")
    )
    return url, key


def _option(secrets, environ, name: str, default):
    value = _get_nested_secret(secrets, "chanlytics", name)
    if value is None:
        value = environ.get(f"CHANLYTICS_{name.upper()}")
    if value is None or value == "":
        return default
    return value


def load_settings(secrets=None, environ=None) -> Settings:
    """Build the app settings from Streamlit secrets, falling back to env vars.

    The Supabase URL and key are required; anything else has a default.
    """
    if secrets is None:
        secrets = st.secrets
    if environ is None:
        environ = os.environ

    url, key = _resolve_supabase_config(secrets, environ)
    if not url:
        raise MissingConfigError(
            "Missing Supabase URL. Add a [supabase] block with url/key to "
            ".streamlit/secrets.toml or set SUPABASE_URL."
        )
    if not key:
        raise MissingConfigError(
            "Missing Supabase key. Add a [supabase] block with url/key to "
            ".streamlit/secrets.toml or set SUPABASE_KEY."
        )

    return Settings(
        supabase_url=str(url),
        supabase_key=str(key),
        timezone=_option(secrets, environ, "timezone", None),
        fetch_window_days=int(_option(secrets, environ, "fetch_window_days", 30)),
        billing_period_days=int(_option(secrets, environ, "billing_period_days", 30)),
        rate_per_minute=float(_option(secrets, environ, "rate_per_minute", 0.50)),
        log_level=str(_option(secrets, environ, "log_level", "INFO")).upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
