"""Typer-based command line interface for kms-aead."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from tink import aead as tink_aead

from ..client import AwsKmsClient
from ..config import AppConfig, build_registry, dump_default_config, load_config
from ..exceptions import KMSAEADError, NoClientFoundError
from ..logging import configure_logging
from ..paths import project_config_file

app = typer.Typer(help="Encrypt and decrypt with AWS KMS keys as AEAD primitives")


@app.callback()
def main(ctx: typer.Context, config: Optional[Path] = typer.Option(None, "--config", metavar="PATH")) -> None:
    try:
        ctx.obj = load_config(config)
    except KMSAEADError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2)
    configure_logging(ctx.obj.logging.normalized_level())


def _resolve_aead(config: AppConfig, key_uri: str) -> tink_aead.Aead:
    registry = build_registry(config)
    try:
        return registry.get_aead(key_uri)
    except NoClientFoundError:
        # unconfigured keys get a client scoped to exactly that key
        return AwsKmsClient(key_uri).get_aead(key_uri)


def _associated_data(value: Optional[str]) -> Optional[bytes]:
    return value.encode("utf-8") if value is not None else None


@app.command()
def encrypt(
    ctx: typer.Context,
    key_uri: str = typer.Argument(..., help="aws-kms:// key URI"),
    input_path: Path = typer.Argument(..., exists=True, readable=True, dir_okay=False),
    output: Path = typer.Option(..., "-o", "--output", help="Write ciphertext here"),
    associated_data: Optional[str] = typer.Option(None, "--associated-data", "-a", help="Text bound to the ciphertext"),
) -> None:
    try:
        ciphertext = _resolve_aead(ctx.obj, key_uri).encrypt(input_path.read_bytes(), _associated_data(associated_data))
    except KMSAEADError as exc:
        typer.echo(f"encrypt failed: {exc}", err=True)
        raise typer.Exit(code=1)
    output.write_bytes(ciphertext)
    typer.echo(f"Ciphertext written to {output}")


@app.command()
def decrypt(
    ctx: typer.Context,
    key_uri: str = typer.Argument(..., help="aws-kms:// key URI"),
    input_path: Path = typer.Argument(..., exists=True, readable=True, dir_okay=False),
    output: Path = typer.Option(..., "-o", "--output", help="Write plaintext here"),
    associated_data: Optional[str] = typer.Option(None, "--associated-data", "-a", help="Text bound at encryption time"),
) -> None:
    try:
        plaintext = _resolve_aead(ctx.obj, key_uri).decrypt(input_path.read_bytes(), _associated_data(associated_data))
    except KMSAEADError as exc:
        typer.echo(f"decrypt failed: {exc}", err=True)
        raise typer.Exit(code=1)
    output.write_bytes(plaintext)
    typer.echo(f"Plaintext written to {output}")


@app.command()
def keys(ctx: typer.Context) -> None:
    config: AppConfig = ctx.obj
    if not config.keys:
        typer.echo("No keys configured")
        return
    for key in config.keys:
        typer.echo(f"{key.uri_prefix}\t{key.encryption_context_name.value}")


@app.command()
def init_config(
    destination: Optional[Path] = typer.Option(None, "--destination", help="Where to write the default config"),
) -> None:
    target = destination or project_config_file()
    if target.exists():
        typer.echo(f"{target} already exists", err=True)
        raise typer.Exit(code=1)
    dump_default_config(target)
    typer.echo(f"Default config written to {target}")


@app.command()
def version() -> None:
    from ..version import __version__

    typer.echo(__version__)


if __name__ == "__main__":  # pragma: no cover
    app()
