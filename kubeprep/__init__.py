"""kubeprep - prepare RPM based hosts to join a Kubernetes cluster."""

__version__ = "0.1.0"
