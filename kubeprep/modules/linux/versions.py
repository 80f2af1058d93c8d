"""Mapping of package roles to pinned yum package specs."""

import logging
from typing import Optional, Union

from packaging.version import InvalidVersion

from ...config import InstallerConfig, get_config
from .errors import CompatibilityUnresolvedError
from .models import PackageRole

logger = logging.getLogger("kubeprep.linux.versions")


def map_yum_package_version(
    role: Union[PackageRole, str],
    kubernetes_version: str,
    config: Optional[InstallerConfig] = None,
) -> str:
    """Build the pinned package spec for a role and Kubernetes version.

    kubeadm, kubectl and kubelet follow the Kubernetes version verbatim.
    kubernetes-cni is chosen by the configured compatibility rule.

    Args:
        role: Package role, either a PackageRole or its value
        kubernetes_version: Target Kubernetes version, e.g. ``1.18.3``
        config: Installer configuration (default: global configuration)

    Returns:
        str: A ``name-version-release`` spec

    Raises:
        CompatibilityUnresolvedError: For unknown roles, or a CNI lookup with
            a version that cannot be parsed
    """
    config = config or get_config()
    packages = config.packages

    try:
        role = PackageRole(role)
    except ValueError:
        raise CompatibilityUnresolvedError(str(role), kubernetes_version) from None

    if role is PackageRole.KUBEADM:
        return f"{packages.kubeadm}-{kubernetes_version}-{packages.release}"
    if role is PackageRole.KUBECTL:
        return f"{packages.kubectl}-{kubernetes_version}-{packages.release}"
    if role is PackageRole.KUBELET:
        return f"{packages.kubelet}-{kubernetes_version}-{packages.release}"

    try:
        pinned = packages.cni_rule.resolve(kubernetes_version)
    except InvalidVersion as e:
        raise CompatibilityUnresolvedError(role.value, kubernetes_version, str(e)) from e
    logger.debug(f"Kubernetes {kubernetes_version} pins {packages.kubernetes_cni}-{pinned}")
    return f"{packages.kubernetes_cni}-{pinned}"
