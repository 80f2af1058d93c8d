"""Host configuration steps run before Kubernetes packages are installed.

Every step is idempotent and goes through a command runner, so the same code
prepares the local machine or a remote host.
"""

import logging
from typing import Sequence

logger = logging.getLogger("kubeprep.linux.host")


def set_selinux_permissive(runner, selinux_config: str = "/etc/selinux/config") -> None:
    """Set SELinux in permissive mode now and across reboots."""
    logger.info("Setting SELinux to permissive mode")
    runner.run(["setenforce", "0"])
    runner.run(["sed", "-i", "s/^SELINUX=enforcing$/SELINUX=permissive/", selinux_config])


def swap_off(runner, fstab: str = "/etc/fstab") -> None:
    """Disable swap and comment out swap entries in fstab."""
    logger.info("Disabling swap")
    runner.run(["swapoff", "-a"])
    runner.run(["sed", "-i", r"/ swap / s/^\(.*\)$/#\1/g", fstab])


def modprobe_kube_proxy_ipvs_modules(runner, modules: Sequence[str], modules_load_file: str) -> None:
    """Load the kernel modules kube-proxy needs in IPVS mode and persist the list."""
    for module in modules:
        logger.debug(f"Loading kernel module {module}")
        runner.run(["modprobe", module])
    runner.write_file(modules_load_file, ''.join(f"{module}\n" for module in modules))
    logger.info(f"Loaded {len(modules)} IPVS kernel modules")


def sysctl_load_all_files(runner) -> None:
    """Reload sysctl settings from all system configuration files."""
    logger.info("Loading sysctl rules")
    runner.run(["sysctl", "--system"])


def ensure_repository_file(runner, path: str, body: str, skip_if_exists: str) -> bool:
    """Write the yum repository file unless a vendor repository is configured.

    Returns:
        bool: True if the file was written
    """
    if runner.exists(skip_if_exists):
        logger.info(f"{skip_if_exists} exists, leaving {path} untouched")
        return False
    runner.write_file(path, body)
    logger.info(f"Wrote repository file {path}")
    return True
