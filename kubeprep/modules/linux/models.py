"""Data models for package installation."""

from dataclasses import dataclass
from enum import Enum
from typing import List

FLAG_MARKER = '-'


class PackageRole(str, Enum):
    """Packages the installer knows how to pin."""
    KUBEADM = 'kubeadm'
    KUBECTL = 'kubectl'
    KUBELET = 'kubelet'
    KUBERNETES_CNI = 'kubernetes-cni'


def is_flag(spec: str) -> bool:
    """Return True for manager flags such as ``--disableexcludes=kubernetes``."""
    return spec.startswith(FLAG_MARKER)


@dataclass(frozen=True)
class QueriedPackage:
    """An installed package as reported by ``rpm -q``."""
    name: str
    version: str
    release: str
    arch: str

    @property
    def full_name(self) -> str:
        return f"{self.name}-{self.version}-{self.release}.{self.arch}"

    def candidates(self) -> List[str]:
        """Identity strings from least to most qualified."""
        return [
            self.name,
            f"{self.name}-{self.version}",
            f"{self.name}-{self.version}-{self.release}",
            self.full_name,
        ]

    def matches(self, spec: str) -> bool:
        """Check whether ``spec`` names this package at any granularity."""
        return any(spec == candidate for candidate in self.candidates())

    def __str__(self) -> str:
        return self.full_name
