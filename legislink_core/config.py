import os
from dataclasses import dataclass
from typing import Any, Optional

import yaml
from rich.console import Console

from legislink_core.ledger import DEFAULT_LEDGER_DIR

console = Console()

DEFAULT_TIMEOUT: float = 30.0
DEFAULT_USER_AGENT: str = "legislink (+https://github.com/unitedstates/legislink)"

DEFAULT_CONFIG: dict[str, Any] = {
    "ledger": {"data_dir": DEFAULT_LEDGER_DIR},
    "http": {"timeout": DEFAULT_TIMEOUT, "user_agent": DEFAULT_USER_AGENT},
    "courtlistener": {"enabled": True},
}


@dataclass(frozen=True)
class CourtListenerCredentials:
    username: str
    password: str


@dataclass(frozen=True)
class Environment:
    """Per-call settings shared by all source resolvers.

    courtlistener is None when no credentials are configured, which disables
    the case search resolver."""
    courtlistener: Optional[CourtListenerCredentials] = None
    ledger_dir: str = DEFAULT_LEDGER_DIR
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Environment":
        credentials = None
        cl = data.get("courtlistener") or {}
        if cl.get("username") and cl.get("password"):
            credentials = CourtListenerCredentials(cl["username"], cl["password"])
        return cls(
            courtlistener=credentials,
            ledger_dir=data.get("ledger_dir", DEFAULT_LEDGER_DIR),
            timeout=float(data.get("timeout", DEFAULT_TIMEOUT)),
            user_agent=data.get("user_agent", DEFAULT_USER_AGENT),
        )


def load_config(config_path: str = "config.yaml") -> dict[str, Any]:
    """
    From config.yaml

    Args:
        config_path: Path to config file (default: config.yaml)

    Returns:
        Configuration dictionary
    """
    try:
        with open(config_path, "r") as f:
            return yaml.safe_load(f) or DEFAULT_CONFIG
    except FileNotFoundError:
        console.print(f"[yellow]Warning: {config_path} not found. Using default config.[/yellow]")
        return DEFAULT_CONFIG


def get_credentials() -> dict[str, str]:
    return {
        "courtlistener_username": os.getenv("COURTLISTENER_USERNAME", ""),
        "courtlistener_password": os.getenv("COURTLISTENER_PASSWORD", ""),
    }


def load_environment(config_path: str = "config.yaml") -> Environment:
    """
    Build the resolver Environment from config.yaml and process environment.

    LEGISLINK_LEDGER_DIR overrides ledger.data_dir. CourtListener credentials
    are only used when courtlistener.enabled is not false.
    """
    config = load_config(config_path)
    credentials = get_credentials()
    http = config.get("http") or {}

    courtlistener = {}
    if (config.get("courtlistener") or {}).get("enabled", True):
        courtlistener = {
            "username": credentials["courtlistener_username"],
            "password": credentials["courtlistener_password"],
        }

    return Environment.from_dict({
        "courtlistener": courtlistener,
        "ledger_dir": os.getenv(
            "LEGISLINK_LEDGER_DIR",
            (config.get("ledger") or {}).get("data_dir", DEFAULT_LEDGER_DIR),
        ),
        "timeout": http.get("timeout", DEFAULT_TIMEOUT),
        "user_agent": http.get("user_agent", DEFAULT_USER_AGENT),
    })
