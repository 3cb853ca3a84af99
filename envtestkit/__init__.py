"""
envtestkit - provisioning of kube-apiserver, etcd and kubectl binaries for
Kubernetes API test environments.
"""

__version__ = "0.1.0"
