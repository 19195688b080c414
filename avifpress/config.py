"""
Runtime configuration for the AVIF compression service.

Values come from environment variables; every setting has a default so the
service runs with no configuration at all.
"""
import os
from dataclasses import dataclass


VERSION = "1.0.0"

DEFAULT_PORT = 3000
DEFAULT_INCOMING_DIR = "tmp"
DEFAULT_DERIVED_DIR = "compressed"
DEFAULT_RETENTION_SECONDS = 60 * 60
DEFAULT_SWEEP_INTERVAL_SECONDS = 60 * 60
DEFAULT_ENCODE_TIMEOUT_SECONDS = 120.0


@dataclass(frozen=True)
class Settings:
    """Service settings passed explicitly to the app and the reaper"""
    incoming_dir: str = DEFAULT_INCOMING_DIR
    derived_dir: str = DEFAULT_DERIVED_DIR
    retention_seconds: float = DEFAULT_RETENTION_SECONDS
    sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS
    encode_timeout_seconds: float = DEFAULT_ENCODE_TIMEOUT_SECONDS
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    debug: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.

        Recognised variables: HOST, PORT, DEBUG, INCOMING_DIR, DERIVED_DIR,
        RETENTION_SECONDS, SWEEP_INTERVAL_SECONDS, ENCODE_TIMEOUT_SECONDS.
        """
        return cls(
            incoming_dir=os.environ.get("INCOMING_DIR", DEFAULT_INCOMING_DIR),
            derived_dir=os.environ.get("DERIVED_DIR", DEFAULT_DERIVED_DIR),
            retention_seconds=float(
                os.environ.get("RETENTION_SECONDS", DEFAULT_RETENTION_SECONDS)
            ),
            sweep_interval_seconds=float(
                os.environ.get("SWEEP_INTERVAL_SECONDS", DEFAULT_SWEEP_INTERVAL_SECONDS)
            ),
            encode_timeout_seconds=float(
                os.environ.get("ENCODE_TIMEOUT_SECONDS", DEFAULT_ENCODE_TIMEOUT_SECONDS)
            ),
            host=os.environ.get("HOST", "0.0.0.0"),
            port=int(os.environ.get("PORT", DEFAULT_PORT)),
            debug=os.environ.get("DEBUG", "").lower() in ("true", "1", "yes"),
        )
