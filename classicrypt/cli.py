"""
Classicrypt CLI
================

Click-based command-line interface for the classical cipher attack lab.
Provides subcommands for the cipher transforms, exhaustive and dictionary
attacks, frequency analysis, credential registration and login, the
interception simulation, the toy Diffie-Hellman exchange and the attack
log.

Usage::

    python -m classicrypt encode "hello" --cipher shift --shift 3
    python -m classicrypt brute-force KHOOR --cipher shift --oracle hello
    python -m classicrypt dictionary khoor --cipher shift --shift 3
    python -m classicrypt register alice --mode weak --cipher affine -a 5 -b 8
    python -m classicrypt mitm alice RCLLA --oracle hello
    python -m classicrypt results

References:
    - Click Documentation. https://click.palletsprojects.com/
"""

from __future__ import annotations

import functools
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

import click

from shared.config import LabConfig
from shared.console import LabConsole
from shared.models import Finding, RunResult

from classicrypt import __version__
from classicrypt.attacks.dictionary import load_wordlist
from classicrypt.core.engine import ClassicryptEngine
from classicrypt.core.errors import ClassicryptError
from classicrypt.core.models import (
    CipherId,
    CredentialMode,
    KeyParams,
    PayloadType,
)
from classicrypt.output.console import ClassicryptConsoleOutput
from classicrypt.output.report import ClassicryptReportGenerator
from classicrypt.parsers.key_parser import build_key_params

_CIPHER_NAMES = [
    "shift", "affine", "digraph", "block", "plaintext",
    "caesar", "playfair", "hill",
]


# ===================================================================== #
#  Shared Options
# ===================================================================== #

def _cipher_option(default: Optional[str] = "shift", choices: Sequence[str] = _CIPHER_NAMES):
    return click.option(
        "--cipher", "-C",
        type=click.Choice(list(choices), case_sensitive=False),
        default=default,
        show_default=default is not None,
        help="Cipher (caesar, playfair and hill are accepted aliases).",
    )


def _key_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach --shift/-a/-b/--keyword/--matrix; unset values keep defaults."""
    options = [
        click.option("--shift", "-s", type=int, default=None, help="Shift cipher key [3]."),
        click.option("-a", "a", type=int, default=None, help="Affine multiplier [5]."),
        click.option("-b", "b", type=int, default=None, help="Affine offset [8]."),
        click.option("--keyword", "-k", default=None, help="Digraph grid keyword [SECRET]."),
        click.option(
            "--matrix", "-m", default=None,
            help='Block cipher matrix, e.g. "6,24,1;13,16,10;20,17,15".',
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _params(kwargs: dict[str, Any]) -> KeyParams:
    return build_key_params(
        shift=kwargs.get("shift"),
        a=kwargs.get("a"),
        b=kwargs.get("b"),
        keyword=kwargs.get("keyword"),
        matrix=kwargs.get("matrix"),
    )


def _lab_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Report :class:`ClassicryptError` as a red error line and exit 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except ClassicryptError as exc:
            click.secho(f"Error: {exc}", fg="red", err=True)
            click.get_current_context().exit(1)

    return wrapper


# ===================================================================== #
#  CLI Group
# ===================================================================== #

@click.group()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to a configuration file (TOML).",
)
@click.option(
    "--output", "-o",
    type=click.Choice(["console", "json"]),
    default="console",
    help="Output format.",
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    default=False,
    help="Suppress banner and informational output.",
)
@click.version_option(__version__, prog_name="classicrypt")
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], output: str, quiet: bool) -> None:
    """Classicrypt -- Classical Cipher Attack Lab.

    Encode with classical ciphers, break them by exhaustive and
    dictionary search, and compare cipher-based password storage with
    salted PBKDF2.
    """
    ctx.ensure_object(dict)

    lab_config = LabConfig.load(config) if config else LabConfig()
    ctx.obj["config"] = lab_config
    ctx.obj["output_format"] = output

    # Keep stdout clean for JSON
    console = LabConsole(quiet=quiet or output == "json")
    ctx.obj["console"] = console
    ctx.obj["engine"] = ClassicryptEngine(lab_config)
    ctx.obj["display"] = ClassicryptConsoleOutput(console)
    ctx.obj["reporter"] = ClassicryptReportGenerator()

    if not quiet:
        console.banner(version=__version__)


def _emit(
    ctx: click.Context,
    operation: str,
    target: str,
    payload: Any,
    render: Callable[[], None],
    findings: Sequence[Finding] = (),
) -> RunResult:
    """Render to the console or print a JSON report, per ``--output``."""
    result = RunResult(
        operation=operation,
        target=target,
        findings=list(findings),
        payload=payload if isinstance(payload, dict) else {"items": payload},
    ).finalize()
    if ctx.obj["output_format"] == "json":
        click.echo(ctx.obj["reporter"].to_json(result))
    else:
        render()
    return result


def _wordlist(ctx: click.Context, path: Optional[str]) -> list[str]:
    if path:
        return load_wordlist(path)
    return ctx.obj["engine"].wordlist()


# ===================================================================== #
#  Cipher Commands
# ===================================================================== #

@cli.command()
@click.argument("text")
@_cipher_option()
@_key_options
@click.pass_context
@_lab_errors
def encode(ctx: click.Context, text: str, cipher: str, **key: Any) -> None:
    """Encrypt TEXT with a classical cipher."""
    engine: ClassicryptEngine = ctx.obj["engine"]
    display: ClassicryptConsoleOutput = ctx.obj["display"]
    cipher_id = CipherId(cipher)
    params = _params(key)

    result = engine.encode(cipher_id, text, params)
    _emit(
        ctx, "encode", text,
        {"cipher": cipher_id.value, "params": params.model_dump(), "result": result},
        lambda: display.display_transform(
            "encode", cipher_id.value, params.describe(cipher_id), text, result
        ),
    )


@cli.command()
@click.argument("text")
@_cipher_option()
@_key_options
@click.pass_context
@_lab_errors
def decode(ctx: click.Context, text: str, cipher: str, **key: Any) -> None:
    """Decrypt TEXT with a classical cipher and a known key."""
    engine: ClassicryptEngine = ctx.obj["engine"]
    display: ClassicryptConsoleOutput = ctx.obj["display"]
    cipher_id = CipherId(cipher)
    params = _params(key)

    result = engine.decode(cipher_id, text, params)
    _emit(
        ctx, "decode", text,
        {"cipher": cipher_id.value, "params": params.model_dump(), "result": result},
        lambda: display.display_transform(
            "decode", cipher_id.value, params.describe(cipher_id), text, result
        ),
    )


# ===================================================================== #
#  Attack Commands
# ===================================================================== #

@cli.command("brute-force")
@click.argument("ciphertext")
@_cipher_option(choices=["shift", "affine", "caesar"])
@click.option("--oracle", default=None, help="Known plaintext confirming success (demo only).")
@click.option("--wordlist", "-w", type=click.Path(exists=True, dir_okay=False), default=None)
@click.option("--all", "show_all", is_flag=True, default=False, help="List every candidate in key order.")
@click.pass_context
@_lab_errors
def brute_force(
    ctx: click.Context,
    ciphertext: str,
    cipher: str,
    oracle: Optional[str],
    wordlist: Optional[str],
    show_all: bool,
) -> None:
    """Try every shift or affine key against CIPHERTEXT."""
    engine: ClassicryptEngine = ctx.obj["engine"]
    display: ClassicryptConsoleOutput = ctx.obj["display"]
    cipher_id = CipherId(cipher)

    outcome = engine.brute_force(ciphertext, cipher_id, oracle, _wordlist(ctx, wordlist))

    def render() -> None:
        if show_all:
            from classicrypt.attacks.exhaustive import brute_force_affine, brute_force_shift

            search = brute_force_shift if cipher_id is CipherId.SHIFT else brute_force_affine
            display.display_candidates(search(ciphertext), "All candidates (key order)")
        display.display_outcome(outcome)

    _emit(ctx, "brute-force", ciphertext, outcome.model_dump(mode="json"), render)


@cli.command()
@click.argument("ciphertext")
@_cipher_option()
@_key_options
@click.option("--wordlist", "-w", type=click.Path(exists=True, dir_okay=False), default=None)
@click.pass_context
@_lab_errors
def dictionary(
    ctx: click.Context, ciphertext: str, cipher: str, wordlist: Optional[str], **key: Any
) -> None:
    """Encode every wordlist entry under a known key and match CIPHERTEXT."""
    engine: ClassicryptEngine = ctx.obj["engine"]
    display: ClassicryptConsoleOutput = ctx.obj["display"]

    outcome = engine.dictionary_attack(
        ciphertext, CipherId(cipher), _params(key), _wordlist(ctx, wordlist)
    )
    _emit(
        ctx, "dictionary", ciphertext, outcome.model_dump(mode="json"),
        lambda: display.display_outcome(outcome),
    )


@cli.command()
@click.argument("text", required=False)
@click.option("--file", "-f", "file_", type=click.Path(exists=True, dir_okay=False), default=None)
@click.pass_context
@_lab_errors
def frequency(ctx: click.Context, text: Optional[str], file_: Optional[str]) -> None:
    """Letter frequency, IC and chi-squared against English."""
    if file_:
        text = Path(file_).read_text(encoding="utf-8")
    if text is None:
        raise click.UsageError("Provide TEXT or --file")
    engine: ClassicryptEngine = ctx.obj["engine"]
    display: ClassicryptConsoleOutput = ctx.obj["display"]

    result = engine.frequency(text)
    _emit(
        ctx, "frequency", file_ or text, result.model_dump(mode="json"),
        lambda: display.display_frequency(result),
    )


@cli.command()
@click.option("--charset", default="0123456789", show_default=True)
@click.option("--length", "-l", type=click.IntRange(min=0), default=4, show_default=True)
@click.option("--max-attempts", type=click.IntRange(min=1), default=None)
@click.pass_context
@_lab_errors
def keyspace(
    ctx: click.Context, charset: str, length: int, max_attempts: Optional[int]
) -> None:
    """Enumerate every password of LENGTH symbols from CHARSET (bounded)."""
    if not charset:
        raise click.BadParameter("must not be empty", param_hint="--charset")
    engine: ClassicryptEngine = ctx.obj["engine"]
    display: ClassicryptConsoleOutput = ctx.obj["display"]

    space = engine.keyspace(charset, length, max_attempts)
    _emit(
        ctx, "keyspace", charset, space.model_dump(mode="json"),
        lambda: display.display_password_space(space),
    )


# ===================================================================== #
#  Credential Commands
# ===================================================================== #

@cli.command()
@click.argument("username")
@click.option("--password", "-p", prompt=True, hide_input=True)
@click.option(
    "--mode",
    type=click.Choice([m.value for m in CredentialMode]),
    default=CredentialMode.WEAK.value,
    show_default=True,
)
@_cipher_option(default="plaintext")
@_key_options
@click.pass_context
@_lab_errors
def register(
    ctx: click.Context, username: str, password: str, mode: str, cipher: str, **key: Any
) -> None:
    """Store a credential record for USERNAME."""
    engine: ClassicryptEngine = ctx.obj["engine"]
    display: ClassicryptConsoleOutput = ctx.obj["display"]

    result = engine.register(
        username, password, CredentialMode(mode), CipherId(cipher), _params(key)
    )
    _emit(
        ctx, "register", username, result.model_dump(mode="json"),
        lambda: display.display_registration(result),
    )


@cli.command()
@click.argument("username")
@click.argument("payload")
@click.option(
    "--payload-type", "-t",
    type=click.Choice([p.value for p in PayloadType]),
    default=PayloadType.PLAINTEXT.value,
    show_default=True,
)
@click.pass_context
@_lab_errors
def login(ctx: click.Context, username: str, payload: str, payload_type: str) -> None:
    """Authenticate USERNAME with PAYLOAD (password or captured ciphertext)."""
    engine: ClassicryptEngine = ctx.obj["engine"]
    display: ClassicryptConsoleOutput = ctx.obj["display"]

    result = engine.login(username, payload, PayloadType(payload_type))
    _emit(
        ctx, "login", username, result.model_dump(mode="json"),
        lambda: display.display_login(result),
    )


@cli.command()
@click.argument("username", required=False)
@click.pass_context
@_lab_errors
def reveal(ctx: click.Context, username: Optional[str]) -> None:
    """Recover stored passwords (every user when USERNAME is omitted)."""
    engine: ClassicryptEngine = ctx.obj["engine"]
    display: ClassicryptConsoleOutput = ctx.obj["display"]

    names = [username] if username else [r.username for r in engine.users()]
    results = [engine.reveal(name) for name in names]

    def render() -> None:
        if not username:
            display.display_users(engine.users())
        if not results:
            ctx.obj["console"].warning("No users found")
        for result in results:
            display.display_reveal(result)

    _emit(
        ctx, "reveal", username or "*",
        [r.model_dump(mode="json") for r in results], render,
    )


# ===================================================================== #
#  Simulation Commands
# ===================================================================== #

@cli.command()
@click.argument("username")
@click.argument("intercepted")
@_cipher_option(default=None)
@click.option("--oracle", default=None, help="Known plaintext confirming success (demo only).")
@click.option("--dh-public", default=None, help="Intercepted client DH public value.")
@click.option("--report", "-r", type=click.Path(dir_okay=False), default=None, help="Write a JSON report.")
@click.pass_context
@_lab_errors
def mitm(
    ctx: click.Context,
    username: str,
    intercepted: str,
    cipher: Optional[str],
    oracle: Optional[str],
    dh_public: Optional[str],
    report: Optional[str],
) -> None:
    """Attack an INTERCEPTED login payload sent by USERNAME."""
    engine: ClassicryptEngine = ctx.obj["engine"]
    display: ClassicryptConsoleOutput = ctx.obj["display"]

    attack_report = engine.simulate_mitm(
        username,
        intercepted,
        cipher=CipherId(cipher) if cipher else None,
        demo_oracle=oracle,
        dh_public=dh_public,
    )
    result = _emit(
        ctx, "mitm", username,
        attack_report.model_dump(mode="json", exclude={"findings"}),
        lambda: display.display_report(attack_report),
        findings=attack_report.findings,
    )
    if report:
        path = ctx.obj["reporter"].generate_json(result, Path(report))
        ctx.obj["console"].success(f"JSON report saved to: {path}")


@cli.command()
@click.option("--client-public", default=None, help="Answer this client public value as the server.")
@click.pass_context
@_lab_errors
def dh(ctx: click.Context, client_public: Optional[str]) -> None:
    """Toy unauthenticated Diffie-Hellman exchange (RFC 3526 group 14)."""
    engine: ClassicryptEngine = ctx.obj["engine"]
    display: ClassicryptConsoleOutput = ctx.obj["display"]

    if client_public is None:
        exchange = engine.dh_exchange()
        _emit(
            ctx, "dh", "simulate", exchange.model_dump(mode="json"),
            lambda: display.display_exchange(exchange),
        )
        return

    try:
        value = int(client_public, 0)
    except ValueError as exc:
        raise click.BadParameter("not an integer", param_hint="--client-public") from exc
    response = engine.dh_respond(value)
    _emit(
        ctx, "dh", client_public, response.model_dump(mode="json"),
        lambda: display.display_dh_response(response),
    )


@cli.command()
@click.pass_context
@_lab_errors
def results(ctx: click.Context) -> None:
    """Show the CSV attack log."""
    engine: ClassicryptEngine = ctx.obj["engine"]
    display: ClassicryptConsoleOutput = ctx.obj["display"]

    entries = engine.results()
    _emit(
        ctx, "results", str(engine.attack_log.path),
        [e.model_dump(mode="json") for e in entries],
        lambda: display.display_results(entries),
    )


# ===================================================================== #
#  Entry Point
# ===================================================================== #

def main() -> None:
    """Main entry point for the Classicrypt CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
