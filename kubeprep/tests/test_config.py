import pytest
import yaml
from pydantic import ValidationError

from kubeprep.config import InstallerConfig, VersionRule, get_config, set_config


def test_defaults():
    config = InstallerConfig()
    assert config.yum.yum_path == "/bin/yum"
    assert config.yum.rpm_path == "/bin/rpm"
    assert config.yum.disable_excludes_flag == "--disableexcludes=kubernetes"
    assert config.packages.containerd_prerequisites == ["libseccomp"]
    assert config.host.repo_file == "/etc/yum.repos.d/kubernetes.repo"


def test_load_yaml(tmp_path):
    path = tmp_path / "kubeprep.yaml"
    path.write_text(yaml.safe_dump({
        "yum": {"yum_path": "/usr/bin/yum"},
        "packages": {"cni_rule": {"constraints": [">=1.20"], "version": "0.8.7", "fallback_version": "0.8.6"}},
        "unknown": {"ignored": True},
    }))
    config = InstallerConfig.load(path)
    assert config.yum.yum_path == "/usr/bin/yum"
    assert config.yum.rpm_path == "/bin/rpm"
    assert config.packages.cni_rule.resolve("1.21.0") == "0.8.7-0"


def test_env_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "kubeprep.yaml"
    path.write_text("yum:\n  rpm_path: /usr/bin/rpm\n")
    monkeypatch.setenv("KUBEPREP_YUM__RPM_PATH", "/opt/bin/rpm")
    monkeypatch.setenv("KUBEPREP_HOST__IPVS_MODULES", "[ip_vs, nf_conntrack_ipv4]")
    monkeypatch.setenv("KUBEPREP_SSH__PORT", "2222")

    config = InstallerConfig.load(path)
    assert config.yum.rpm_path == "/opt/bin/rpm"
    assert config.host.ipvs_modules == ["ip_vs", "nf_conntrack_ipv4"]
    assert config.ssh.port == 2222


def test_missing_explicit_path(tmp_path):
    with pytest.raises(FileNotFoundError):
        InstallerConfig.load(tmp_path / "missing.yaml")


def test_invalid_constraint_rejected():
    with pytest.raises(ValidationError):
        VersionRule(constraints=["not a version"], version="1", fallback_version="0")


def test_save_round_trip(tmp_path):
    config = InstallerConfig()
    config.yum.yum_path = "/usr/bin/dnf"
    path = tmp_path / "out" / "config.yaml"
    config.save(path)
    assert InstallerConfig.load(path).yum.yum_path == "/usr/bin/dnf"


def test_global_config():
    custom = InstallerConfig()
    set_config(custom)
    assert get_config() is custom
