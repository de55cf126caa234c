"""
Core server bootstrap for the pod resolver.

The Kubernetes session is built during startup() and injected into the routes,
so the request handlers never reach for module-level state.
"""

import logging

import uvicorn
from starlette.applications import Starlette

from pod_resolver.client import PodLookupClient
from pod_resolver.routes import ResolverDependencies, build_routes
from pod_resolver.settings import Settings


class ServerApp:
    """Owns the Starlette app and the Kubernetes session for the process lifetime."""

    def __init__(self, settings: Settings) -> None:
        self._logger = logging.getLogger(__name__)
        self._settings = settings
        self._lookup_client: PodLookupClient | None = None
        self._dependencies = ResolverDependencies()
        self._app = Starlette(routes=build_routes(self._dependencies))

    def startup(self) -> None:
        """Connect to the Kubernetes API. Raises KubeConfigError on failure."""
        self._logger.info(
            "Starting server bootstrap",
            extra={"kube_config": str(self._settings.kube_config_path)},
        )
        self._lookup_client = PodLookupClient.from_settings(self._settings)
        self._dependencies.attach_client(self._lookup_client)

    def shutdown(self) -> None:
        """Release acquired resources."""
        self._logger.info("Shutting down server bootstrap")
        self._dependencies.detach_client()
        if self._lookup_client is not None:
            self._lookup_client.close()
            self._lookup_client = None

    def serve_forever(self) -> None:
        """Run the HTTP listener until interrupted."""
        host = self._settings.host
        port = self._settings.port
        self._logger.info("Starting HTTP listener", extra={"host": host, "port": port})
        uvicorn.run(self._app, host=host, port=port, log_level="warning")

    async def serve_async(self) -> None:
        """Async helper for running the listener inside an event loop (used by smoke tests)."""
        config = uvicorn.Config(
            self._app,
            host=self._settings.host,
            port=self._settings.port,
            log_level="error",
        )
        await uvicorn.Server(config).serve()


def build_server(settings: Settings) -> ServerApp:
    """Factory used by main.py to create the configured server instance."""
    return ServerApp(settings)
