import pytest
from typer.testing import CliRunner

from kubeprep.cli import app
from kubeprep.commands import install, package

cli = CliRunner()

INSTALLED = {
    "kubelet-1.18.3-0": "kubelet-1.18.3-0.x86_64",
    "kubeadm-1.18.3-0": "kubeadm-1.18.3-0.x86_64",
    "kubectl-1.18.3-0": "kubectl-1.18.3-0.x86_64",
    "kubernetes-cni-0.7.5-0": "kubernetes-cni-0.7.5-0.x86_64",
}


@pytest.fixture
def local(monkeypatch, fake_runner):
    runner = fake_runner(rpm=INSTALLED)
    monkeypatch.setattr(install, "LocalRunner", lambda: runner)
    monkeypatch.setattr(package, "LocalRunner", lambda: runner)
    return runner


def test_help():
    result = cli.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "install" in result.stdout
    assert "package" in result.stdout


def test_install_kubernetes(local):
    result = cli.invoke(app, ["install", "kubernetes", "--kubernetes-version", "1.18.3"])
    assert result.exit_code == 0, result.output
    assert "kubernetes-cni-0.7.5-0.x86_64" in result.stdout
    assert local.calls[0][:3] == ["/bin/yum", "install", "-y"]


def test_install_kubeadm_mismatch_exits_nonzero(monkeypatch, fake_runner):
    runner = fake_runner(rpm=dict(INSTALLED, **{"kubeadm-1.18.3-0": "kubeadm-1.18.2-0.x86_64"}))
    monkeypatch.setattr(install, "LocalRunner", lambda: runner)
    result = cli.invoke(app, ["install", "kubeadm", "-k", "1.18.3"])
    assert result.exit_code == 1


def test_install_uses_config_file(tmp_path, local):
    path = tmp_path / "kubeprep.yaml"
    path.write_text("yum:\n  yum_path: /usr/bin/yum\n")
    result = cli.invoke(app, ["--config", str(path), "install", "kubernetes", "-k", "1.18.3"])
    assert result.exit_code == 0, result.output
    assert local.calls[0][0] == "/usr/bin/yum"


def test_missing_config_file_exits_cleanly(tmp_path):
    result = cli.invoke(app, ["--config", str(tmp_path / "missing.yaml"), "install", "kubernetes", "-k", "1.18.3"])
    assert result.exit_code == 1
    assert "Failed to load config" in result.output


def test_install_remote_host(monkeypatch, fake_runner):
    runner = fake_runner(rpm={"libseccomp": "libseccomp-2.3.1-4.el7.x86_64"})
    opened = {}

    class FakeSSHRunner:
        @classmethod
        def from_config(cls, host, ssh_config, **overrides):
            opened.update(host=host, **overrides)
            return cls()

        def __enter__(self):
            return runner

        def __exit__(self, *exc):
            return None

    monkeypatch.setattr(install, "SSHRunner", FakeSSHRunner)
    result = cli.invoke(app, ["install", "containerd", "--host", "10.0.0.5", "--ssh-user", "centos"])
    assert result.exit_code == 0, result.output
    assert opened["host"] == "10.0.0.5"
    assert opened["user"] == "centos"
    assert runner.calls[0] == ["/bin/yum", "install", "-y", "libseccomp"]


def test_package_spec():
    result = cli.invoke(app, ["package", "spec", "kubernetes-cni", "-k", "1.13.4"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "kubernetes-cni-0.6.0-0"


def test_package_spec_unknown_role():
    result = cli.invoke(app, ["package", "spec", "kube-proxy", "-k", "1.18.3"])
    assert result.exit_code == 1


def test_package_query(local):
    result = cli.invoke(app, ["package", "query", "kubeadm-1.18.3-0"])
    assert result.exit_code == 0
    assert "version: 1.18.3" in result.stdout
    assert "arch:    x86_64" in result.stdout


def test_malformed_config_file_exits_cleanly(tmp_path):
    path = tmp_path / "kubeprep.yaml"
    path.write_text("yum: [unclosed\n")
    result = cli.invoke(app, ["--config", str(path), "install", "kubernetes", "-k", "1.18.3"])
    assert result.exit_code == 1
    assert "Failed to load config" in result.output
