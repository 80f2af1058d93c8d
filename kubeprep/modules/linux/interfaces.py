"""Capabilities a package manager backend provides."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ContainerdPackages(Protocol):
    """Installs what containerd needs from the OS."""

    def install_containerd_prerequisites(self, containerd_version: str):
        ...


@runtime_checkable
class KubernetesPackages(Protocol):
    """Prepares the host and installs the Kubernetes node packages."""

    def install_kubernetes_prerequisites(self, kubernetes_version: str):
        ...

    def install_kubernetes_packages(self, kubernetes_version: str):
        ...

    def install_kubeadm_package(self, kubernetes_version: str):
        ...
