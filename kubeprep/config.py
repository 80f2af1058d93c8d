"""Configuration management for kubeprep.

Configuration is loaded from multiple sources with the following precedence:
1. Explicitly passed config path
2. Environment variables (``KUBEPREP_<SECTION>__<FIELD>``)
3. Configuration files
4. Default values
"""
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dotenv import load_dotenv
from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import Version
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file if it exists
load_dotenv()

logger = logging.getLogger("kubeprep.config")

ENV_PREFIX = "KUBEPREP_"
ENV_NESTED_DELIMITER = "__"

DEFAULT_CONFIG_PATHS = [
    Path("/etc/kubeprep/config.yaml"),
    Path("~/.config/kubeprep/config.yaml").expanduser(),
    Path("kubeprep.yaml").absolute(),
]

K8S_RPM_REPO = """[kubernetes]
name=Kubernetes
baseurl=https://packages.cloud.google.com/yum/repos/kubernetes-el7-x86_64
enabled=1
gpgcheck=1
repo_gpgcheck=1
gpgkey=https://packages.cloud.google.com/yum/doc/yum-key.gpg https://packages.cloud.google.com/yum/doc/rpm-package-key.gpg
exclude=kube*"""


class VersionRule(BaseModel):
    """Pins a package version from the Kubernetes version it ships with."""
    constraints: List[str] = Field(
        default_factory=list,
        description="Version specifiers, any of which selects `version`"
    )
    version: str
    fallback_version: str
    release: str = "0"

    @field_validator('constraints')
    @classmethod
    def check_constraints(cls, v: List[str]) -> List[str]:
        """Reject specifiers packaging cannot parse."""
        for constraint in v:
            try:
                SpecifierSet(constraint)
            except InvalidSpecifier as e:
                raise ValueError(f"invalid version constraint {constraint!r}: {e}")
        return v

    def resolve(self, kubernetes_version: Union[str, Version]) -> str:
        """Return ``version-release`` for the matching branch of the rule.

        Raises:
            packaging.version.InvalidVersion: If the version cannot be parsed
        """
        ver = kubernetes_version if isinstance(kubernetes_version, Version) else Version(kubernetes_version)
        if any(ver in SpecifierSet(c) for c in self.constraints):
            return f"{self.version}-{self.release}"
        return f"{self.fallback_version}-{self.release}"


class YumConfig(BaseModel):
    """Package manager binaries and flags."""
    yum_path: str = Field(default="/bin/yum", description="yum binary")
    rpm_path: str = Field(default="/bin/rpm", description="rpm binary")
    disable_excludes_flag: str = Field(
        default="--disableexcludes=kubernetes",
        description="Flag lifting the repository `exclude=kube*` rule"
    )


class PackagesConfig(BaseModel):
    """Package names and version policy."""
    kubeadm: str = "kubeadm"
    kubectl: str = "kubectl"
    kubelet: str = "kubelet"
    kubernetes_cni: str = "kubernetes-cni"
    release: str = Field(default="0", description="Release pinned for kube* packages")
    containerd_prerequisites: List[str] = Field(default_factory=lambda: ["libseccomp"])
    cni_rule: VersionRule = Field(
        default_factory=lambda: VersionRule(
            constraints=[">=1.12.7,<1.13.0", ">=1.13.5"],
            version="0.7.5",
            fallback_version="0.6.0",
            release="0",
        )
    )


class HostConfig(BaseModel):
    """Host preparation settings."""
    selinux_config: str = "/etc/selinux/config"
    fstab: str = "/etc/fstab"
    ipvs_modules: List[str] = Field(
        default_factory=lambda: ["ip_vs", "ip_vs_rr", "ip_vs_wrr", "ip_vs_sh", "nf_conntrack"]
    )
    modules_load_file: str = "/etc/modules-load.d/kube-proxy-ipvs.conf"
    repo_file: str = "/etc/yum.repos.d/kubernetes.repo"
    vendor_repo_file: str = Field(
        default="/etc/yum.repos.d/banzaicloud.repo",
        description="When present, the Kubernetes repository file is left alone"
    )
    repo_body: str = K8S_RPM_REPO


class SSHConfig(BaseModel):
    """SSH connection configuration for remote hosts."""
    user: str = Field(default="root", description="Default SSH username")
    key_path: str = Field(default="~/.ssh/id_rsa", description="Path to SSH private key")
    port: int = Field(default=22, description="SSH port number")
    connect_timeout: int = Field(default=10, description="SSH connection timeout in seconds")
    retry_attempts: int = Field(default=3, description="Number of SSH connection attempts")
    sudo: bool = Field(default=False, description="Prefix remote commands with sudo")

    @field_validator('key_path')
    @classmethod
    def expand_key_path(cls, v: str) -> str:
        """Expand the user home directory in the key path."""
        return os.path.expanduser(v)


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field(default="INFO", description="Logging level")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = Field(default=None, description="Path to log file")
    max_size_mb: int = Field(default=100, description="Maximum log file size in MB before rotation")
    backup_count: int = Field(default=5, description="Number of backup log files to keep")


class InstallerConfig(BaseModel):
    """kubeprep configuration."""
    yum: YumConfig = Field(default_factory=YumConfig)
    packages: PackagesConfig = Field(default_factory=PackagesConfig)
    host: HostConfig = Field(default_factory=HostConfig)
    ssh: SSHConfig = Field(default_factory=SSHConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"extra": "ignore"}

    @classmethod
    def load(cls, config_path: Optional[Union[str, Path]] = None) -> 'InstallerConfig':
        """Load configuration from file and environment variables."""
        config_data: Dict[str, Any] = {}

        if config_path:
            config_path = Path(config_path).expanduser().absolute()
            if not config_path.exists():
                raise FileNotFoundError(f"Config file not found: {config_path}")
            config_data = cls._load_config_file(config_path)
        else:
            for path in DEFAULT_CONFIG_PATHS:
                path = path.expanduser().absolute()
                if path.exists():
                    config_data = cls._load_config_file(path)
                    break

        return cls(**_apply_env_overrides(config_data, os.environ))

    @classmethod
    def _load_config_file(cls, path: Path) -> Dict[str, Any]:
        """Load configuration from a YAML file."""
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Invalid config format in {path}: expected mapping, got {type(data).__name__}")
        logger.debug(f"Loaded config from {path}")
        return data

    def save(self, path: Union[str, Path]) -> None:
        """Save configuration to a file."""
        path = Path(path).expanduser().absolute()
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w') as f:
            yaml.safe_dump(self.model_dump(exclude_none=True), f, default_flow_style=False, sort_keys=False)


def _apply_env_overrides(config_data: Dict[str, Any], environ) -> Dict[str, Any]:
    """Merge ``KUBEPREP_SECTION__FIELD`` variables into the file data.

    List and mapping values are given in YAML flow style, e.g.
    ``KUBEPREP_HOST__IPVS_MODULES='[ip_vs, ip_vs_rr]'``.
    """
    result = {k: dict(v) if isinstance(v, dict) else v for k, v in config_data.items()}
    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX) or ENV_NESTED_DELIMITER not in key:
            continue
        section, _, field = key[len(ENV_PREFIX):].lower().partition(ENV_NESTED_DELIMITER)
        if section not in InstallerConfig.model_fields or not field:
            continue
        if value.startswith(("[", "{")):
            value = yaml.safe_load(value)
        result.setdefault(section, {})[field] = value
    return result


# Global configuration instance
_config: Optional[InstallerConfig] = None


def get_config(config_path: Optional[Union[str, Path]] = None) -> InstallerConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = InstallerConfig.load(config_path)
    return _config


def set_config(config: Optional[InstallerConfig]) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
