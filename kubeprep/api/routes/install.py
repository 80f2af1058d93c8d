import logging
import threading
from typing import Callable, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from kubeprep.config import get_config
from kubeprep.modules.linux import (
    CommandError,
    InstallerError,
    LocalRunner,
    PrerequisiteError,
    SSHRunner,
    YumInstaller,
)

logger = logging.getLogger("kubeprep.api.install")

router = APIRouter(prefix="/install")

# yum holds an exclusive lock on the rpm database; one batch at a time.
_install_lock = threading.Lock()


class HostRequest(BaseModel):
    host: Optional[str] = None
    ssh_user: Optional[str] = None
    ssh_key: Optional[str] = None


class KubernetesRequest(HostRequest):
    kubernetes_version: str


class ContainerdRequest(HostRequest):
    containerd_version: str = ""


class InstalledPackage(BaseModel):
    name: str
    version: str
    release: str
    arch: str


class InstallResponse(BaseModel):
    status: str = "success"
    packages: List[InstalledPackage] = []


def runner_for(req: HostRequest):
    if req.host:
        return SSHRunner.from_config(req.host, get_config().ssh, user=req.ssh_user, key_path=req.ssh_key)
    return LocalRunner()


def _status_code(error: InstallerError) -> int:
    if isinstance(error, PrerequisiteError) and error.__cause__ is not None:
        error = error.__cause__
    if isinstance(error, CommandError):
        return 502
    return 422


def _install(req: HostRequest, action: Callable[[YumInstaller], object]) -> InstallResponse:
    if not _install_lock.acquire(blocking=False):
        raise HTTPException(status_code=409, detail="An installation is already in progress")
    runner = runner_for(req)
    try:
        installed = action(YumInstaller(runner, get_config())) or []
    except InstallerError as e:
        logger.error(f"[INSTALL] {e}")
        raise HTTPException(status_code=_status_code(e), detail=str(e))
    finally:
        if isinstance(runner, SSHRunner):
            runner.close()
        _install_lock.release()

    return InstallResponse(packages=[
        InstalledPackage(name=p.name, version=p.version, release=p.release, arch=p.arch)
        for p in installed
    ])


@router.post("/kubernetes", response_model=InstallResponse)
def install_kubernetes(req: KubernetesRequest):
    logger.info(f"[INSTALL] Kubernetes packages {req.kubernetes_version} on {req.host or 'localhost'}")
    return _install(req, lambda i: i.install_kubernetes_packages(req.kubernetes_version))


@router.post("/kubeadm", response_model=InstallResponse)
def install_kubeadm(req: KubernetesRequest):
    logger.info(f"[INSTALL] kubeadm {req.kubernetes_version} on {req.host or 'localhost'}")
    return _install(req, lambda i: i.install_kubeadm_package(req.kubernetes_version))


@router.post("/containerd", response_model=InstallResponse)
def install_containerd(req: ContainerdRequest):
    logger.info(f"[INSTALL] containerd prerequisites on {req.host or 'localhost'}")
    return _install(req, lambda i: i.install_containerd_prerequisites(req.containerd_version))


@router.post("/prerequisites", response_model=InstallResponse)
def install_prerequisites(req: KubernetesRequest):
    logger.info(f"[INSTALL] host prerequisites for {req.kubernetes_version} on {req.host or 'localhost'}")
    return _install(req, lambda i: i.install_kubernetes_prerequisites(req.kubernetes_version))
