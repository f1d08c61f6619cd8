"""Kubeconfig resolution, construction and serialization."""
