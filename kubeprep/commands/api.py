import typer

app = typer.Typer(help="Run the kubeprep HTTP API.")


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Address to bind"),
    port: int = typer.Option(8000, help="Port to listen on"),
):
    """Serve the install API with uvicorn."""
    import uvicorn

    typer.echo(f"🚀 Serving kubeprep API on {host}:{port}")
    uvicorn.run("kubeprep.api.main:app", host=host, port=port)
