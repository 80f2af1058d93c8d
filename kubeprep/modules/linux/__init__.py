"""Linux host package installation.

- runner: Command execution on the local host or over SSH
- rpm: Decoding of ``rpm -q`` identities
- versions: Pinned package specs per Kubernetes version
- yum: Batched install-and-verify and the YumInstaller
- host: Host preparation steps
- interfaces: Capability protocols for package manager backends
"""

from .errors import (
    CommandError,
    CompatibilityUnresolvedError,
    InstallerError,
    PackageQueryParseError,
    PackageVersionMismatchError,
    PrerequisiteError,
)
from .interfaces import ContainerdPackages, KubernetesPackages
from .models import PackageRole, QueriedPackage, is_flag
from .rpm import parse_rpm_package_output, rpm_query
from .runner import CommandRunner, LocalRunner, SSHRunner
from .versions import map_yum_package_version
from .yum import YumInstaller, yum_install

__all__ = [
    'CommandError',
    'CompatibilityUnresolvedError',
    'InstallerError',
    'PackageQueryParseError',
    'PackageVersionMismatchError',
    'PrerequisiteError',
    'ContainerdPackages',
    'KubernetesPackages',
    'PackageRole',
    'QueriedPackage',
    'is_flag',
    'parse_rpm_package_output',
    'rpm_query',
    'CommandRunner',
    'LocalRunner',
    'SSHRunner',
    'map_yum_package_version',
    'YumInstaller',
    'yum_install',
]
