"""Parsing of ``rpm -q`` output."""

import logging

from .errors import PackageQueryParseError
from .models import QueriedPackage

logger = logging.getLogger("kubeprep.linux.rpm")

DOT = '.'
DASH = '-'


def parse_rpm_package_output(output: str) -> QueriedPackage:
    """Split a ``name-version-release.arch`` identity into its fields.

    The rightmost separators are used, so a dashed package name such as
    ``kubernetes-cni`` is kept whole as long as version and release carry
    no dashes.

    Args:
        output: A single identity line printed by ``rpm -q``

    Returns:
        QueriedPackage: The decoded identity

    Raises:
        PackageQueryParseError: If the expected separators are missing
    """
    pkg = output.strip()

    idx = pkg.rfind(DOT)
    if idx < 0:
        raise PackageQueryParseError(output)
    arch = pkg[idx + 1:]

    pkg = pkg[:idx]
    idx = pkg.rfind(DASH)
    if idx < 0:
        raise PackageQueryParseError(output)
    release = pkg[idx + 1:]

    pkg = pkg[:idx]
    idx = pkg.rfind(DASH)
    if idx < 0:
        raise PackageQueryParseError(output)
    version = pkg[idx + 1:]
    name = pkg[:idx]

    return QueriedPackage(name=name, version=version, release=release, arch=arch)


def rpm_query(runner, package: str, rpm_path: str = "/bin/rpm") -> QueriedPackage:
    """Query an installed package and decode the reported identity.

    Raises:
        CommandError: If rpm fails, e.g. the package is not installed
        PackageQueryParseError: If rpm printed something unexpected
    """
    output = runner.output([rpm_path, "-q", package])
    queried = parse_rpm_package_output(output)
    logger.debug(f"rpm reports {queried.full_name} for {package}")
    return queried
