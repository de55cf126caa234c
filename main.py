"""Entry point for the pod resolver HTTP service."""

import logging
import os
import sys

from pod_resolver.kube_client import KubeConfigError
from pod_resolver.server import build_server
from pod_resolver.settings import Settings


def _configure_logging() -> None:
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def main() -> None:
    """Bootstrap and run the HTTP server."""
    _configure_logging()
    logger = logging.getLogger("pod-resolver")
    settings = Settings.load()
    server = build_server(settings)

    try:
        server.startup()
    except KubeConfigError:
        logger.critical("Failed to create K8s client", exc_info=True)
        sys.exit(1)

    try:
        logger.info("Now listening to podname API requests on :%s", settings.port)
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutdown requested (Ctrl+C).")
    except Exception:
        logger.exception("Server stopped due to an unexpected error.")
        raise
    finally:
        server.shutdown()
        logger.info("Server shutdown complete.")


if __name__ == "__main__":
    main()
