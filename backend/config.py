"""Centralized configuration, all env vars in one place."""

import math
import os
import re

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_BARE_SECONDS = re.compile(r"\d+(?:\.\d*)?|\.\d+")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(value: str) -> float:
    """Parse a duration such as ``5s``, ``250ms`` or ``1m30s`` into seconds.

    A bare number is read as seconds.
    """
    text = value.strip()
    if _BARE_SECONDS.fullmatch(text):
        seconds = float(text)
        pos = len(text)
    else:
        pos = 0
        seconds = 0.0
        for match in _DURATION_PART.finditer(text):
            if match.start() != pos:
                break
            seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
            pos = match.end()
    if not text or pos != len(text) or not math.isfinite(seconds):
        raise ValueError(f"Invalid duration: {value!r}")
    return seconds


def parse_listen_addr(addr: str) -> tuple[str, int]:
    """Split ``host:port`` into its parts. An empty host means all interfaces."""
    host, sep, port = addr.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"Invalid listen address: {addr!r}")
    host = host.strip("[]") or "0.0.0.0"
    return host, int(port)


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # Room being reported
        self.room_name: str | None = os.getenv("PEEPHOLE_ROOM_NAME") or None
        self.http_host, self.http_port = parse_listen_addr(
            os.getenv("PEEPHOLE_HTTP_ADDR") or ":9339"
        )
        self.cache_expiry: float = parse_duration(os.getenv("PEEPHOLE_CACHE_EXPIRY") or "5s")

        # Upstream room census (Prosody HTTP)
        self.census_host: str = os.getenv("XMPP_SERVER") or "xmpp.meet.jitsi"
        self.census_port: str = os.getenv("PROSODY_HTTP_PORT") or "5280"
        self.upstream_timeout: float = float(os.getenv("PEEPHOLE_UPSTREAM_TIMEOUT") or 10)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate(self) -> list[str]:
        """Return list of missing required env vars."""
        required = ["PEEPHOLE_ROOM_NAME"]
        return [var for var in required if not getattr(self, _attr_for(var))]


settings = Settings()


def _attr_for(env_var: str) -> str:
    """Map env var name to Settings attribute name."""
    mapping = {
        "PEEPHOLE_ROOM_NAME": "room_name",
    }
    return mapping.get(env_var, env_var.lower())
