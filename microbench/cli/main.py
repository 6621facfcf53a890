r"""
Command-line interface for microbench.

    microbench run "sorted(data)" --setup "data = list(range(1000))" -n 1000
    microbench run "a + b" "a * b" --setup "a, b = 3, 4" -n -1
    microbench exec script.py arg1 arg2
"""

import json
import logging
import runpy
import sys
from pathlib import Path
from typing import Annotated, Any

try:
    import typer
except ImportError:
    typer = None  # type: ignore

__all__ = ["app", "main"]


def _check_typer() -> None:
    if typer is None:
        msg = "typer package not installed. Install with: pip install 'microbench[cli]'"
        raise ImportError(msg)


def _parse_backend_options(pairs: list[str]) -> dict[str, Any]:
    """Parse ``key=value`` pairs; values are JSON when they parse as JSON."""
    from microbench.errors import ConfigurationError

    options: dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            msg = f"Backend option must be key=value, got '{pair}'"
            raise ConfigurationError(msg)
        try:
            options[key] = json.loads(raw)
        except json.JSONDecodeError:
            options[key] = raw
    return options


def _compile_unit(statement: str, namespace: dict[str, Any]) -> Any:
    code = compile(statement, "<microbench>", "exec")

    def unit() -> None:
        exec(code, namespace)

    return unit


def _compile_units(statements: list[str], namespace: dict[str, Any]) -> dict[str, Any]:
    """Compile statements into units of work named by their text."""
    from microbench.errors import ConfigurationError

    units: dict[str, Any] = {}
    for stmt in statements:
        if stmt in units:
            msg = f"Duplicate statement: '{stmt}'"
            raise ConfigurationError(msg)
        units[stmt] = _compile_unit(stmt, namespace)
    return units


if typer is not None:
    app = typer.Typer(
        name="microbench",
        help="Low-ceremony micro-benchmarking for Python code.",
        no_args_is_help=True,
    )

    @app.command()
    def run(
        statements: Annotated[list[str], typer.Argument(help="Python statements to time")],
        number: Annotated[
            int | None, typer.Option("-n", "--number", help="Calls to make; negative = seconds to run")
        ] = None,
        setup: Annotated[str | None, typer.Option("--setup", help="Code run once before timing")] = None,
        backend: Annotated[
            bool | None, typer.Option("--backend/--no-backend", help="Force or forbid the statistical backend")
        ] = None,
        backend_option: Annotated[
            list[str] | None, typer.Option("-O", "--backend-option", help="Backend option as key=value")
        ] = None,
        json_: Annotated[bool, typer.Option("--json", help="Print the report as JSON")] = False,
        verbose: Annotated[bool, typer.Option("-v", "--verbose", help="Verbose output")] = False,
    ) -> None:
        """Time one or more Python statements."""
        from microbench.errors import MicrobenchError
        from microbench.reporting import JsonExporter
        from microbench.session import BenchmarkSession

        if verbose:
            logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

        namespace: dict[str, Any] = {"__name__": "__microbench__"}
        if setup:
            exec(compile(setup, "<setup>", "exec"), namespace)

        session = BenchmarkSession()
        try:
            options = {
                "subs": _compile_units(statements, namespace),
                "n": number,
                "backend": backend,
                "backend_options": _parse_backend_options(backend_option or []),
            }
            if backend is True or backend_option:
                session.use_backend("statistical")
            if json_:
                report = session.run(options)
                typer.echo(JsonExporter().to_string(report))
            else:
                session.run_and_print(options)
        except MicrobenchError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)

    @app.command(
        "exec",
        context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
    )
    def exec_(
        script: Annotated[Path, typer.Argument(help="Python script to run")],
        args: Annotated[list[str] | None, typer.Argument(help="Arguments passed to the script")] = None,
    ) -> None:
        """Run a script and print its total run time unless it calls bench()."""
        from microbench.session import BenchmarkSession, set_session

        if not script.exists():
            typer.echo(f"File not found: {script}", err=True)
            raise typer.Exit(1)

        session = BenchmarkSession()
        previous = set_session(session)
        # an exit hook on the replaced session must not print a second time
        previous.finish(report=False)
        saved_argv = sys.argv
        sys.argv = [str(script), *(args or [])]
        try:
            runpy.run_path(str(script), run_name="__main__")
        finally:
            sys.argv = saved_argv
            set_session(previous)
            session.finish()

    @app.command()
    def backends() -> None:
        """List registered external backends."""
        from microbench.backends import BackendRegistry

        typer.echo("Available backends:")
        for name in BackendRegistry.list():
            typer.echo(f"  - {name}")

    def main() -> None:
        """Main entry point."""
        _check_typer()
        app()

else:

    def app() -> None:
        _check_typer()

    def main() -> None:
        _check_typer()


if __name__ == "__main__":
    main()
