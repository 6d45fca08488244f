"""Builders for the dependent Kubernetes objects."""

from .config import build_config
from .policy import build_policy, policy_name
from .secret import build_secret
from .workload import build_workload

__all__ = [
    "build_config",
    "build_policy",
    "build_secret",
    "build_workload",
    "policy_name",
]
