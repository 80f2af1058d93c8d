import logging
from typing import Callable, Optional

import typer

from kubeprep.config import get_config
from kubeprep.modules.linux import InstallerError, LocalRunner, SSHRunner, YumInstaller

logger = logging.getLogger("kubeprep.commands.install")

app = typer.Typer(help="Install packages and prerequisites on a host.")

HOST_OPTION = typer.Option(None, "--host", "-H", help="Remote host to prepare over SSH (default: this machine)")
SSH_USER_OPTION = typer.Option(None, "--ssh-user", "-u", help="SSH username")
SSH_KEY_OPTION = typer.Option(None, "--ssh-key", "-i", help="Path to SSH private key")


def _run(action: Callable[[YumInstaller], object], host: Optional[str], ssh_user: Optional[str], ssh_key: Optional[str]):
    """Run an installer action on the local machine or a remote host."""
    config = get_config()
    try:
        if host:
            with SSHRunner.from_config(host, config.ssh, user=ssh_user, key_path=ssh_key) as runner:
                return action(YumInstaller(runner, config))
        return action(YumInstaller(LocalRunner(), config))
    except InstallerError as e:
        logger.error(f"❌ {e}")
        if e.__cause__ is not None:
            logger.error(f"   caused by: {e.__cause__}")
        raise typer.Exit(code=1)


def _report(installed) -> None:
    for pkg in installed or []:
        typer.echo(f"✅ {pkg.full_name}")


@app.command("kubernetes")
def install_kubernetes(
    kubernetes_version: str = typer.Option(..., "--kubernetes-version", "-k", help="Kubernetes version, e.g. 1.18.3"),
    host: Optional[str] = HOST_OPTION,
    ssh_user: Optional[str] = SSH_USER_OPTION,
    ssh_key: Optional[str] = SSH_KEY_OPTION,
):
    """Install kubelet, kubeadm, kubectl and kubernetes-cni."""
    typer.echo(f"📦 Installing Kubernetes {kubernetes_version} packages")
    _report(_run(lambda i: i.install_kubernetes_packages(kubernetes_version), host, ssh_user, ssh_key))


@app.command("kubeadm")
def install_kubeadm(
    kubernetes_version: str = typer.Option(..., "--kubernetes-version", "-k", help="Kubernetes version, e.g. 1.18.3"),
    host: Optional[str] = HOST_OPTION,
    ssh_user: Optional[str] = SSH_USER_OPTION,
    ssh_key: Optional[str] = SSH_KEY_OPTION,
):
    """Install kubeadm and the packages it depends on."""
    typer.echo(f"📦 Installing kubeadm {kubernetes_version}")
    _report(_run(lambda i: i.install_kubeadm_package(kubernetes_version), host, ssh_user, ssh_key))


@app.command("containerd")
def install_containerd(
    containerd_version: str = typer.Option("", "--containerd-version", help="containerd version the host will run"),
    host: Optional[str] = HOST_OPTION,
    ssh_user: Optional[str] = SSH_USER_OPTION,
    ssh_key: Optional[str] = SSH_KEY_OPTION,
):
    """Install the OS packages containerd needs."""
    typer.echo("📦 Installing containerd prerequisites")
    _report(_run(lambda i: i.install_containerd_prerequisites(containerd_version), host, ssh_user, ssh_key))


@app.command("prerequisites")
def install_prerequisites(
    kubernetes_version: str = typer.Option(..., "--kubernetes-version", "-k", help="Kubernetes version, e.g. 1.18.3"),
    host: Optional[str] = HOST_OPTION,
    ssh_user: Optional[str] = SSH_USER_OPTION,
    ssh_key: Optional[str] = SSH_KEY_OPTION,
):
    """Configure SELinux, swap, kernel modules, sysctl and the yum repository."""
    typer.echo(f"🔧 Preparing host for Kubernetes {kubernetes_version}")
    _run(lambda i: i.install_kubernetes_prerequisites(kubernetes_version), host, ssh_user, ssh_key)
    typer.echo("✅ Host prepared")
