"""Configuration management for uitest-support."""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


@dataclass
class Config:
    """Global configuration for uitest-support.

    All values can be overridden via environment variables with UITEST_ prefix.
    Example: UITEST_RESOLVE_TIMEOUT=5
    """

    # Element resolution
    resolve_timeout: float = field(
        default_factory=lambda: float(os.environ.get("UITEST_RESOLVE_TIMEOUT", "10.0"))
    )

    # Overlay dismissal probes
    overlay_probe_timeout: float = field(
        default_factory=lambda: float(os.environ.get("UITEST_OVERLAY_PROBE_TIMEOUT", "1.0"))
    )
    dismiss_probe_timeout: float = field(
        default_factory=lambda: float(os.environ.get("UITEST_DISMISS_PROBE_TIMEOUT", "0.5"))
    )

    # Report persistence
    report_dir: str = field(
        default_factory=lambda: os.environ.get("UITEST_REPORT_DIR", "dashboard-data")
    )

    # Account fixture
    login_path: str = field(
        default_factory=lambda: os.environ.get("UITEST_LOGIN_PATH", "/login")
    )
    test_email: str = field(default_factory=lambda: os.environ.get("UITEST_EMAIL", ""))
    test_password: str = field(
        default_factory=lambda: os.environ.get("UITEST_PASSWORD", "")
    )

    # Logging
    log_level: str = field(
        default_factory=lambda: os.environ.get("UITEST_LOG_LEVEL", "INFO")
    )

    def validate(self) -> None:
        """Validate that timeouts are usable.

        Raises:
            ValueError: If any timeout is not positive.
        """
        for name in ("resolve_timeout", "overlay_probe_timeout", "dismiss_probe_timeout"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")

    def require_credentials(self) -> tuple[str, str]:
        """Return the configured test account credentials.

        Raises:
            ValueError: If either credential is missing.
        """
        if not self.test_email or not self.test_password:
            raise ValueError(
                "Test account credentials not found. Set UITEST_EMAIL and "
                "UITEST_PASSWORD or pass them to the Config constructor."
            )
        return self.test_email, self.test_password

    @classmethod
    def from_env(cls) -> "Config":
        """Create a Config instance from environment variables.

        Returns:
            Config instance with values from environment.
        """
        return cls()
