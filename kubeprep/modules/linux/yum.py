"""Package installation with yum, verified with rpm."""

import logging
from typing import List, Optional, Sequence

from ...config import InstallerConfig, get_config
from . import host
from .errors import InstallerError, PackageVersionMismatchError, PrerequisiteError
from .models import PackageRole, QueriedPackage, is_flag
from .rpm import rpm_query
from .versions import map_yum_package_version

logger = logging.getLogger("kubeprep.linux.yum")


def yum_install(runner, packages: Sequence[str], config: Optional[InstallerConfig] = None) -> List[QueriedPackage]:
    """Install packages in one yum transaction and verify what got installed.

    Every non-flag entry is queried with rpm afterwards and must match the
    installed identity by name, name-version, name-version-release or the
    fully qualified name. Nothing is rolled back when verification fails.

    Args:
        runner: Command runner for the target host
        packages: Package specs and yum flags, in command line order
        config: Installer configuration (default: global configuration)

    Returns:
        list: The installed packages as reported by rpm, in request order

    Raises:
        CommandError: If yum or rpm fails
        PackageQueryParseError: If rpm output cannot be parsed
        PackageVersionMismatchError: If an installed version differs from the request
    """
    config = config or get_config()
    packages = list(packages)

    logger.info(f"📦 Installing {', '.join(p for p in packages if not is_flag(p))}")
    runner.run([config.yum.yum_path, "install", "-y"] + packages)

    installed = []
    for pkg in packages:
        if is_flag(pkg):
            continue

        queried = rpm_query(runner, pkg, config.yum.rpm_path)
        if not queried.matches(pkg):
            raise PackageVersionMismatchError(pkg, queried.full_name)
        logger.debug(f"✅ {pkg} verified as {queried.full_name}")
        installed.append(queried)

    logger.info(f"✅ Installed {len(installed)} package(s)")
    return installed


class YumInstaller:
    """Installs containerd and Kubernetes packages on RPM based hosts.

    Implements both ContainerdPackages and KubernetesPackages.
    """

    def __init__(self, runner, config: Optional[InstallerConfig] = None):
        """Initialize the installer.

        Args:
            runner: Command runner for the target host
            config: Installer configuration (default: global configuration)
        """
        self.runner = runner
        self.config = config or get_config()

    def _map(self, role: PackageRole, kubernetes_version: str) -> str:
        return map_yum_package_version(role, kubernetes_version, self.config)

    def install_kubernetes_prerequisites(self, kubernetes_version: str) -> None:
        """Prepare the host for kubelet: SELinux, swap, kernel modules, sysctl, repository."""
        cfg = self.config.host
        logger.info(f"🔧 Preparing host for Kubernetes {kubernetes_version}")

        host.set_selinux_permissive(self.runner, cfg.selinux_config)
        host.swap_off(self.runner, cfg.fstab)
        host.modprobe_kube_proxy_ipvs_modules(self.runner, cfg.ipvs_modules, cfg.modules_load_file)

        try:
            host.sysctl_load_all_files(self.runner)
        except InstallerError as e:
            raise PrerequisiteError("unable to load all sysctl rules from files") from e

        host.ensure_repository_file(self.runner, cfg.repo_file, cfg.repo_body, cfg.vendor_repo_file)

    def install_kubernetes_packages(self, kubernetes_version: str) -> List[QueriedPackage]:
        # yum install -y kubelet kubeadm kubectl kubernetes-cni --disableexcludes=kubernetes
        packages = [
            self._map(PackageRole.KUBELET, kubernetes_version),
            self._map(PackageRole.KUBEADM, kubernetes_version),
            self._map(PackageRole.KUBECTL, kubernetes_version),
            self._map(PackageRole.KUBERNETES_CNI, kubernetes_version),
            self.config.yum.disable_excludes_flag,
        ]
        return yum_install(self.runner, packages, self.config)

    def install_kubeadm_package(self, kubernetes_version: str) -> List[QueriedPackage]:
        """Install kubeadm with kubelet and kubernetes-cni, which it depends on."""
        packages = [
            self._map(PackageRole.KUBEADM, kubernetes_version),
            self._map(PackageRole.KUBELET, kubernetes_version),
            self._map(PackageRole.KUBERNETES_CNI, kubernetes_version),
            self.config.yum.disable_excludes_flag,
        ]
        return yum_install(self.runner, packages, self.config)

    def install_containerd_prerequisites(self, containerd_version: str) -> List[QueriedPackage]:
        packages = self.config.packages.containerd_prerequisites
        try:
            return yum_install(self.runner, packages, self.config)
        except InstallerError as e:
            raise PrerequisiteError(f"unable to install {', '.join(packages)} package") from e
