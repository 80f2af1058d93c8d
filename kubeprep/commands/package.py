import typer

from kubeprep.config import get_config
from kubeprep.modules.linux import InstallerError, LocalRunner, map_yum_package_version, rpm_query

app = typer.Typer(help="Inspect package identities.")


@app.command("query")
def query_package(name: str = typer.Argument(..., help="Installed package name or spec")):
    """Show the installed identity of a package as reported by rpm."""
    config = get_config()
    try:
        pkg = rpm_query(LocalRunner(), name, config.yum.rpm_path)
    except InstallerError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"name:    {pkg.name}")
    typer.echo(f"version: {pkg.version}")
    typer.echo(f"release: {pkg.release}")
    typer.echo(f"arch:    {pkg.arch}")


@app.command("spec")
def package_spec(
    role: str = typer.Argument(..., help="kubeadm, kubectl, kubelet or kubernetes-cni"),
    kubernetes_version: str = typer.Option(..., "--kubernetes-version", "-k", help="Kubernetes version, e.g. 1.18.3"),
):
    """Print the pinned yum package spec for a Kubernetes version."""
    try:
        typer.echo(map_yum_package_version(role, kubernetes_version, get_config()))
    except InstallerError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=1)
