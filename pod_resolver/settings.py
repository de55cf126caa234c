"""Environment-driven configuration utilities for the pod resolver."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

POD_NAMESPACE = "default"
DEFAULT_HOME = "/root"


@dataclass(frozen=True, slots=True)
class Settings:
    """Container for runtime configuration."""

    home_dir: Path
    port: int = 8585
    host: str = "0.0.0.0"

    @property
    def kube_config_path(self) -> Path:
        """Location of the kubeconfig used to reach the cluster API."""
        return self.home_dir / ".kube" / "config"

    @classmethod
    def load(cls) -> "Settings":
        """
        Load configuration from environment variables.

        Python-dotenv is used so developers can rely on a local .env file without
        exporting variables globally.
        """
        load_dotenv()

        home_dir = os.getenv("HOME", "").strip() or DEFAULT_HOME

        port_raw = os.getenv("RESOLVER_PORT", "").strip() or "8585"
        try:
            port = int(port_raw)
        except ValueError as exc:
            raise ValueError("RESOLVER_PORT must be an integer.") from exc
        if port <= 0:
            raise ValueError("RESOLVER_PORT must be greater than zero.")

        host = os.getenv("RESOLVER_HOST", "").strip() or "0.0.0.0"

        return cls(home_dir=Path(home_dir), port=port, host=host)
