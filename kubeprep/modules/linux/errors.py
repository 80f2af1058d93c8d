"""Exceptions raised while installing and verifying host packages."""
from typing import Optional, Sequence


class InstallerError(Exception):
    """Base class for every error raised by the package installer."""
    pass


class CommandError(InstallerError):
    """A command exited non-zero or could not be started."""

    def __init__(self, argv: Sequence[str], returncode: Optional[int] = None, output: str = ""):
        self.argv = list(argv)
        self.returncode = returncode
        self.output = output
        if returncode is None:
            message = f"failed to run {' '.join(self.argv)!r}"
        else:
            message = f"command {' '.join(self.argv)!r} exited with status {returncode}"
        if output.strip():
            message += f": {output.strip().splitlines()[-1]}"
        super().__init__(message)


class PackageQueryParseError(InstallerError):
    """rpm output is not a ``name-version-release.arch`` identity."""

    def __init__(self, output: str):
        self.output = output
        super().__init__(f"unable to parse rpm output: {output!r}")


class PackageVersionMismatchError(InstallerError):
    """The installed package does not match the requested spec."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"expected package version after installation: {expected!r}, got: {actual!r}"
        )


class CompatibilityUnresolvedError(InstallerError):
    """No pinned package could be derived for a role and Kubernetes version."""

    def __init__(self, role: str, kubernetes_version: str, reason: str = "unknown package role"):
        self.role = role
        self.kubernetes_version = kubernetes_version
        super().__init__(
            f"cannot map package {role!r} for Kubernetes {kubernetes_version!r}: {reason}"
        )


class PrerequisiteError(InstallerError):
    """A host prerequisite step failed; the underlying error is the ``__cause__``."""
    pass
