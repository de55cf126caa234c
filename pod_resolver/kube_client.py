"""Kubernetes API session factory for the pod resolver."""

import logging

import yaml
from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException

from pod_resolver.settings import Settings

logger = logging.getLogger(__name__)


class KubeConfigError(RuntimeError):
    """Raised when no usable Kubernetes session can be built at start-up."""


def create_core_api(settings: Settings) -> client.CoreV1Api:
    """
    Build a CoreV1Api bound to the cluster described by the user's kubeconfig.

    The session is created once and shared by every request for the lifetime
    of the process.
    """
    config_path = settings.kube_config_path
    if not config_path.is_file():
        raise KubeConfigError(f"Kubernetes config not found at {config_path}.")

    try:
        api_client = config.new_client_from_config(config_file=str(config_path))
    # Structurally wrong but parseable YAML surfaces as plain Python errors.
    except (
        ConfigException,
        yaml.YAMLError,
        OSError,
        TypeError,
        KeyError,
        AttributeError,
        ValueError,
    ) as exc:
        raise KubeConfigError(
            f"Failed to create Kubernetes client from {config_path}: {exc!s}"
        ) from exc

    logger.debug(
        "Kubernetes client configured",
        extra={"config_path": str(config_path), "host": api_client.configuration.host},
    )
    return client.CoreV1Api(api_client)
