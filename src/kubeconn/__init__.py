"""Kubernetes connection resolver (kubeconn).

Resolve kubeconfig documents into flat, validated connection parameters and build them back.
"""

__version__ = "0.1.0"
__author__ = "Platform Engineering Team"
__license__ = "Apache-2.0"
