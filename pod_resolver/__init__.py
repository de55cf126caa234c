"""
Pod resolver package.

Resolves a Kubernetes pod name to the host IP of the node it runs on and
serves the answer over a single HTTP route.
"""

__all__ = []
