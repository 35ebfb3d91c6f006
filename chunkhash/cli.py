"""chunkhash CLI application with Typer."""

import logging
import os
import platform
import sys
from pathlib import Path
from typing import Annotated

import typer

from chunkhash import __version__
from chunkhash.app.strategy import HashingMode
from chunkhash.bootstrap import bootstrap_application
from chunkhash.config import ExecutionContext, get_settings, normalize_request, set_settings
from chunkhash.errors import ChunkHashError, ConfigurationError, UnsupportedEnvironmentError
from chunkhash.utils.chunking import chunk_size_to_bytes, compute_chunks
from chunkhash.utils.cli_output import json_response

app = typer.Typer(
    name="chunkhash",
    help="Chunked, parallel content hashing for large files",
    add_completion=True,
    no_args_is_help=True,
)

PRODUCER = f"chunkhash-{__version__}"


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"chunkhash version {__version__}")
        raise typer.Exit()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _fail(message: str, code: int = 1) -> typer.Exit:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    return typer.Exit(code=code)


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", callback=version_callback, is_eager=True),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log wave and pool activity to stderr"),
    ] = False,
    backend: Annotated[
        str | None,
        typer.Option("--backend", help="Worker backend: process or thread"),
    ] = None,
) -> None:
    """chunkhash - Chunked, parallel content hashing for large files."""
    settings = get_settings()
    if backend:
        if backend not in ("process", "thread"):
            raise _fail(f"Unknown backend '{backend}' (expected process or thread)", code=2)
        settings = settings.model_copy(update={"worker_backend": backend})
        set_settings(settings)
    _configure_logging("DEBUG" if verbose else settings.log_level)


@app.command("hash")
def hash_file(
    path: Annotated[Path, typer.Argument(help="File to hash")],
    chunk_size: Annotated[
        int | None,
        typer.Option("--chunk-size", "-c", min=1, help="Chunk size in MB"),
    ] = None,
    chunk_bytes: Annotated[
        int | None,
        typer.Option(
            "--chunk-bytes", min=1, help="Exact chunk size in bytes (overrides --chunk-size)"
        ),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option("--workers", "-w", min=1, help="Worker pool capacity / wave size"),
    ] = None,
    mode: Annotated[
        HashingMode | None,
        typer.Option("--mode", "-m", help="Hashing mode"),
    ] = None,
    border_count: Annotated[
        int | None,
        typer.Option("--border-count", min=1, help="Mixed-mode chunk count threshold"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output results as JSON"),
    ] = False,
    show_chunks: Annotated[
        bool,
        typer.Option("--show-chunks", help="List every chunk range and digest"),
    ] = False,
) -> None:
    """Compute the root hash of a file."""
    settings = get_settings()
    if workers is not None:
        settings = settings.model_copy(update={"max_worker_count": workers})

    container = bootstrap_application(settings)
    try:
        request = normalize_request(
            ExecutionContext.PATH,
            file_path=path,
            settings=settings,
            chunk_size=chunk_size,
            chunk_size_bytes=chunk_bytes,
            max_worker_count=workers,
            mode=mode,
            border_count=border_count,
        )
        result = container.hash_request(request)
    except (ConfigurationError, UnsupportedEnvironmentError) as exc:
        raise _fail(str(exc), code=2) from exc
    except (ChunkHashError, FileNotFoundError, ValueError) as exc:
        raise _fail(str(exc)) from exc
    finally:
        container.shutdown()

    if json_output:
        payload = result.to_dict(include_chunks=show_chunks)
        typer.echo(json_response("file_hash", 1, producer=PRODUCER, **payload))
        return

    typer.echo(f"{result.root_hash}  {path}")
    typer.secho(
        f"algorithm={result.algorithm.value} chunks={len(result.chunks)} "
        f"waves={result.wave_count} duration={result.duration_seconds:.3f}s",
        fg=typer.colors.BLUE,
    )
    if show_chunks:
        for item, chunk in zip(result.results, result.chunks):
            typer.echo(f"  [{item.index}] {chunk.offset}-{chunk.end} {item.digest}")


@app.command("chunks")
def list_chunks(
    path: Annotated[Path, typer.Argument(help="File to partition")],
    chunk_size: Annotated[
        int | None,
        typer.Option("--chunk-size", "-c", min=1, help="Chunk size in MB"),
    ] = None,
    chunk_bytes: Annotated[
        int | None,
        typer.Option("--chunk-bytes", min=1, help="Exact chunk size in bytes"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output results as JSON"),
    ] = False,
) -> None:
    """List the chunk ranges a file would be split into, without hashing."""
    if not path.is_file():
        raise _fail(f"Not a file: {path}")

    size_bytes = chunk_bytes or chunk_size_to_bytes(chunk_size or get_settings().chunk_size)
    chunks = compute_chunks(path.stat().st_size, size_bytes)

    if json_output:
        typer.echo(
            json_response(
                "chunk_ranges",
                1,
                producer=PRODUCER,
                path=str(path),
                chunk_size=size_bytes,
                chunks=[chunk.to_dict() for chunk in chunks],
            )
        )
        return

    typer.secho(f"{len(chunks)} chunks of up to {size_bytes} bytes", fg=typer.colors.GREEN)
    for chunk in chunks:
        typer.echo(f"  [{chunk.index}] offset={chunk.offset} length={chunk.length}")


@app.command("doctor")
def doctor(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output results as JSON"),
    ] = False,
) -> None:
    """Run health checks and report system status.

    Example:
        chunkhash doctor
        chunkhash doctor --json
    """
    checks: list[dict[str, str | bool]] = []
    all_passed = True

    def add_check(name: str, passed: bool, message: str, suggestion: str = "") -> None:
        nonlocal all_passed
        if not passed:
            all_passed = False
        checks.append({
            "name": name,
            "passed": passed,
            "message": message,
            "suggestion": suggestion,
        })

    # 1. Python version
    py_version = platform.python_version()
    py_ok = sys.version_info >= (3, 11)
    add_check(
        "python_version",
        py_ok,
        f"Python {py_version}",
        "chunkhash requires Python 3.11+" if not py_ok else "",
    )

    # 2. CPU count vs configured workers
    settings = get_settings()
    cpu_count = os.cpu_count() or 1
    add_check(
        "worker_capacity",
        True,
        f"{settings.max_worker_count} {settings.worker_backend} workers on {cpu_count} CPUs",
        "",
    )

    # 3. Effective settings
    add_check(
        "settings",
        True,
        f"chunk_size={settings.chunk_size}MB mode={settings.mode.value} "
        f"border_count={settings.border_count}",
        "",
    )

    # 4. Pool smoke test
    container = bootstrap_application(settings)
    try:
        pool = container.pool_manager.acquire()
        digests = pool.dispatch([b"chunkhash"], "md5")
        add_check("worker_pool", len(digests) == 1, "Worker pool dispatched a test wave", "")
    except Exception as exc:
        add_check(
            "worker_pool",
            False,
            f"Worker pool failed: {exc}",
            "Retry with --backend thread",
        )
    finally:
        container.shutdown()

    if json_output:
        typer.echo(
            json_response(
                "doctor_report",
                1,
                producer=PRODUCER,
                all_passed=all_passed,
                checks=checks,
            )
        )
    else:
        typer.echo()
        typer.secho("chunkhash doctor", fg=typer.colors.CYAN, bold=True)
        typer.secho("=" * 40, fg=typer.colors.CYAN)
        for check in checks:
            icon = "✓" if check["passed"] else "✗"
            color = typer.colors.GREEN if check["passed"] else typer.colors.RED
            typer.secho(f"  {icon} {check['message']}", fg=color)
            if check.get("suggestion") and not check["passed"]:
                typer.secho(f"    → {check['suggestion']}", fg=typer.colors.YELLOW)
        typer.echo()

    if not all_passed:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
