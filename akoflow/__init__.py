"""Workflow orchestration core: entities, Kubernetes manifests, SQLite repositories and a work queue."""

__version__ = "0.1.0"