import mimetypes
import os
from typing import Optional

import requests
import typer

from client.controller import JobController
from config import client_relay_url
from schemas.assets import ImageAsset

app = typer.Typer(help="clothswap: send a person photo (and garment) to the ClothSwap relay")


def load_asset(path: str) -> ImageAsset:
    try:
        with open(path, "rb") as f:
            content = f.read()
    except OSError as exc:
        typer.echo(f"error: cannot read {path}: {exc.strerror or exc}", err=True)
        raise typer.Exit(code=1)
    content_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
    return ImageAsset(filename=os.path.basename(path), content=content, content_type=content_type)


@app.command()
def submit(
    person: str = typer.Argument(..., help="Person photo (required)"),
    garment: Optional[str] = typer.Option(None, "--garment", "-g", help="Garment reference image"),
    prompt: str = typer.Option("", "--prompt", "-p", help="Optional instructions for the worker"),
    relay_url: Optional[str] = typer.Option(None, "--relay-url", help="Relay base URL"),
):
    """Submit one ClothSwap job and print the result image URL."""
    controller = JobController(relay_url or client_relay_url())

    if not controller.select_source(load_asset(person)):
        typer.echo(f"error: {controller.error}", err=True)
        raise typer.Exit(code=1)
    if garment and not controller.select_reference(load_asset(garment)):
        typer.echo(f"error: {controller.error}", err=True)
        raise typer.Exit(code=1)
    controller.set_prompt(prompt)

    typer.echo("processing...", err=True)
    if not controller.submit():
        typer.echo(f"error: {controller.error}", err=True)
        raise typer.Exit(code=1)

    link = controller.download_link()
    typer.echo(link.url)


@app.command()
def contract(relay_url: Optional[str] = typer.Option(None, "--relay-url", help="Relay base URL")):
    """Show which fields the deployed relay requires."""
    controller = JobController(relay_url or client_relay_url())
    try:
        resp = controller.session.get(f"{controller.relay_url}/contract/clothswap")
        resp.raise_for_status()
        data = resp.json()
    except (requests.RequestException, ValueError) as exc:
        typer.echo(f"error: could not fetch relay contract: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"relay_mode={data.get('relay_mode')} required={','.join(data.get('required_fields') or [])}")


if __name__ == "__main__":
    app()
