"""
Pod lookup client wrapping the Kubernetes CoreV1 API.

Not-found and API-level failures are folded into a not-found result; only
transport failures escape, as PodLookupError.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from kubernetes import client
from kubernetes.client.exceptions import ApiException
from urllib3.exceptions import HTTPError

from pod_resolver.kube_client import create_core_api
from pod_resolver.settings import POD_NAMESPACE, Settings

logger = logging.getLogger(__name__)

POD_NOT_FOUND_MESSAGE = "Error: Pod not found"


class PodLookupError(RuntimeError):
    """Represents failures when communicating with the Kubernetes API."""


@dataclass(frozen=True, slots=True)
class PodLookupResult:
    """Outcome of a single pod lookup."""

    found: bool
    host_ip: str = ""
    message: str = ""

    @classmethod
    def not_found(cls) -> "PodLookupResult":
        return cls(found=False, message=POD_NOT_FOUND_MESSAGE)


def _status_message(exc: ApiException) -> str:
    """Pull the human-readable message out of a Kubernetes Status body."""
    body: Any = exc.body
    if body:
        try:
            payload = json.loads(body)
        except (TypeError, ValueError):
            payload = None
        if isinstance(payload, dict) and payload.get("message"):
            return str(payload["message"])
    return str(exc.reason or f"status {exc.status}")


@dataclass(slots=True)
class PodLookupClient:
    """Typed wrapper around the shared CoreV1Api session."""

    _core_api: client.CoreV1Api
    namespace: str = POD_NAMESPACE

    @classmethod
    def from_settings(cls, settings: Settings) -> "PodLookupClient":
        """Factory that builds the client from Settings."""
        return cls(create_core_api(settings))

    def close(self) -> None:
        """Close the underlying API client connection pool."""
        api_client = getattr(self._core_api, "api_client", None)
        if api_client is not None:
            api_client.close()

    def fetch_host_ip(self, pod_name: str) -> PodLookupResult:
        """Return the host IP of the node running ``pod_name``."""
        if not pod_name.strip():
            raise ValueError("pod_name must be a non-empty string.")
        name = pod_name

        try:
            pod = self._core_api.read_namespaced_pod(name=name, namespace=self.namespace)
        except ApiException as exc:
            if exc.status == 404:
                logger.info("Pod %s not found in %s namespace", name, self.namespace)
            else:
                logger.warning(
                    "Error getting pod %s",
                    _status_message(exc),
                    extra={"pod": name, "status_code": exc.status},
                )
            return PodLookupResult.not_found()
        except HTTPError as exc:
            logger.error(
                "Kubernetes API request failed",
                extra={"pod": name, "namespace": self.namespace},
                exc_info=exc,
            )
            raise PodLookupError(
                f"Kubernetes API request failed for pod {name}: {exc!s}"
            ) from exc

        host_ip = ""
        if pod.status is not None and pod.status.host_ip:
            host_ip = pod.status.host_ip
        logger.info("Found %s pod in %s namespace: %s", name, self.namespace, host_ip)
        return PodLookupResult(found=True, host_ip=host_ip)
