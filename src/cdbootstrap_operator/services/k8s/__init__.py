"""Kubernetes API client."""

from .client import ResourceClient, load_kube_config

__all__ = ["ResourceClient", "load_kube_config"]
