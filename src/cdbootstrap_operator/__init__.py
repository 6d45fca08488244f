"""CDBootstrap Operator: bootstraps Azure Pipelines agents from CDBootstrap resources."""

__version__ = "0.1.0"
