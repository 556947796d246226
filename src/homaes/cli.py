"""Command-line interface for homomorphic AES-128."""

from __future__ import annotations

import random
import sys
from typing import Callable, TextIO

import click

from .engines import create_engine, list_engines
from .golden import FIPS_197_TEST_VECTORS
from .interfaces import Result, SessionConfig, default_circuit_workers
from .reporting import export_to_json, format_op_counts, format_results_table
from .session import HomomorphicAES
from .trace import TraceRecorder, print_header, print_result
from .utils import parse_block_hex, random_block


def session_options(fn: Callable) -> Callable:
    """Options shared by every command that builds a session."""
    options = [
        click.option(
            "--engine",
            type=str,
            default="clear",
            help="Evaluation engine (see 'homaes list', default: clear)",
        ),
        click.option(
            "--d",
            "mask_order_d",
            type=int,
            default=1,
            help="Masking order for the masked engine (1=2-share, 2=3-share, default: 1)",
        ),
        click.option(
            "--seed",
            type=int,
            default=None,
            help="Random seed for reproducibility",
        ),
        click.option(
            "--circuit-workers",
            type=int,
            default=None,
            help="Worker threads per circuit evaluation (1-8, default: min(8, CPUs))",
        ),
        click.option(
            "--state-workers",
            type=int,
            default=16,
            help="Worker threads per round stage (1-16, default: 16)",
        ),
    ]
    for option in reversed(options):
        fn = option(fn)
    return fn


def _build_config(
    engine: str,
    mask_order_d: int,
    seed: int | None,
    circuit_workers: int | None,
    state_workers: int,
) -> SessionConfig:
    try:
        return SessionConfig(
            engine=engine,
            mask_order_d=mask_order_d,
            seed=seed,
            circuit_workers=default_circuit_workers() if circuit_workers is None else circuit_workers,
            state_workers=state_workers,
        )
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _build_session(
    config: SessionConfig, verbose: bool = False, trace_file: TextIO | None = None
) -> HomomorphicAES:
    try:
        engine = create_engine(config)
    except KeyError as e:
        click.echo(f"Error: {e.args[0]}", err=True)
        sys.exit(1)

    tracer = None
    if verbose or trace_file is not None:
        # The owner may look inside its own ciphertexts
        tracer = TraceRecorder(
            verbose=verbose, trace_file=trace_file, inspect=engine.decrypt_bytes
        )
    return HomomorphicAES(config, engine=engine, tracer=tracer)


def _parse_block(value: str, label: str) -> bytes:
    try:
        return parse_block_hex(value, label)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version="0.1.0", prog_name="homaes")
def main() -> None:
    """Homomorphic AES-128 over encrypted bits.

    Runs AES encryption and decryption where every state byte and round
    key byte stays encrypted under an evaluation engine.
    """
    pass


@main.command(name="list")
def list_cmd() -> None:
    """List available evaluation engines."""
    click.echo("Available engines:")
    click.echo("")
    for engine in list_engines():
        click.echo(f"  {engine['name']}")
        click.echo(f"    {engine['description']}")
        click.echo("")


def _run_block(
    direction: str,
    key_hex: str,
    block_hex: str,
    config: SessionConfig,
    verbose: bool,
    trace_file: TextIO | None,
    json_path: str | None,
) -> None:
    key = _parse_block(key_hex, "Key")
    label = "Plaintext" if direction == "encrypt" else "Ciphertext"
    block = _parse_block(block_hex, label)
    session = _build_session(config, verbose, trace_file)

    if verbose:
        print_header(f"Homomorphic AES-128 {direction}  engine={config.engine}")
        click.echo(f"Key  : {key.hex()}")
        click.echo(f"Input: {block.hex()}")
        click.echo("")

    if direction == "encrypt":
        result = session.encrypt_block(key, block)
    else:
        result = session.decrypt_block(key, block)

    if verbose:
        print_result(
            result.output,
            result.elapsed_seconds,
            result.total_ops,
            random_bits=result.random_bits_total,
            passed=result.correct,
        )
        click.echo("")
        click.echo(format_op_counts(result))
    else:
        click.echo(result.output.hex())

    if not result.correct:
        click.echo(f"Error: {result.error_detail}", err=True)

    if json_path:
        path = export_to_json([result], json_path)
        click.echo(f"JSON report: {path}")

    sys.exit(0 if result.correct else 1)


@main.command()
@click.option("--key", "key_hex", type=str, required=True, help="16-byte key as hex")
@click.option("--plaintext", "block_hex", type=str, required=True, help="16-byte block as hex")
@session_options
@click.option("--verbose", "-v", is_flag=True, help="Show per-stage trace and details")
@click.option("--trace-file", type=click.File("w"), default=None, help="Write JSON Lines trace")
@click.option("--json", "json_path", type=click.Path(), default=None, help="Write JSON report")
def encrypt(
    key_hex: str,
    block_hex: str,
    engine: str,
    mask_order_d: int,
    seed: int | None,
    circuit_workers: int | None,
    state_workers: int,
    verbose: bool,
    trace_file: TextIO | None,
    json_path: str | None,
) -> None:
    """Encrypt one block homomorphically."""
    config = _build_config(engine, mask_order_d, seed, circuit_workers, state_workers)
    _run_block("encrypt", key_hex, block_hex, config, verbose, trace_file, json_path)


@main.command()
@click.option("--key", "key_hex", type=str, required=True, help="16-byte key as hex")
@click.option("--ciphertext", "block_hex", type=str, required=True, help="16-byte block as hex")
@session_options
@click.option("--verbose", "-v", is_flag=True, help="Show per-stage trace and details")
@click.option("--trace-file", type=click.File("w"), default=None, help="Write JSON Lines trace")
@click.option("--json", "json_path", type=click.Path(), default=None, help="Write JSON report")
def decrypt(
    key_hex: str,
    block_hex: str,
    engine: str,
    mask_order_d: int,
    seed: int | None,
    circuit_workers: int | None,
    state_workers: int,
    verbose: bool,
    trace_file: TextIO | None,
    json_path: str | None,
) -> None:
    """Decrypt one block homomorphically."""
    config = _build_config(engine, mask_order_d, seed, circuit_workers, state_workers)
    _run_block("decrypt", key_hex, block_hex, config, verbose, trace_file, json_path)


@main.command()
@session_options
@click.option(
    "--n",
    "num_tests",
    type=int,
    default=5,
    help="Number of random blocks per direction (default: 5)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show every result")
@click.option("--json", "json_path", type=click.Path(), default=None, help="Write JSON report")
def validate(
    engine: str,
    mask_order_d: int,
    seed: int | None,
    circuit_workers: int | None,
    state_workers: int,
    num_tests: int,
    verbose: bool,
    json_path: str | None,
) -> None:
    """Validate an engine against known answers and random blocks."""
    config = _build_config(engine, mask_order_d, seed, circuit_workers, state_workers)
    session = _build_session(config)

    click.echo(f"Validating engine: {engine}")
    click.echo(
        f"Config: d={mask_order_d}, circuit_workers={config.circuit_workers}, "
        f"state_workers={config.state_workers}"
    )
    click.echo("")

    results: list[Result] = []

    click.echo("Running known-answer tests...")
    kat_passed = 0
    for i, vec in enumerate(FIPS_197_TEST_VECTORS):
        enc = session.encrypt_block(vec["key"], vec["plaintext"])
        dec = session.decrypt_block(vec["key"], vec["ciphertext"])
        results.extend([enc, dec])
        ok = (
            enc.correct and dec.correct
            and enc.output == vec["ciphertext"]
            and dec.output == vec["plaintext"]
        )
        if ok:
            kat_passed += 1
            if verbose:
                click.echo(f"  KAT {i+1}: PASS")
        else:
            detail = enc.error_detail or dec.error_detail or "output differs from vector"
            click.echo(f"  KAT {i+1}: FAIL - {detail}")
    click.echo(f"Known-answer tests: {kat_passed}/{len(FIPS_197_TEST_VECTORS)} passed")

    click.echo(f"\nRunning {num_tests} random round trips...")
    rng = random.Random(seed)
    random_passed = 0
    for i in range(num_tests):
        key = random_block(rng)
        pt = random_block(rng)
        enc = session.encrypt_block(key, pt)
        dec = session.decrypt_block(key, enc.output)
        results.extend([enc, dec])
        if enc.correct and dec.correct and dec.output == pt:
            random_passed += 1
        elif verbose:
            click.echo(f"  Random test {i+1}: FAIL - {enc.error_detail or dec.error_detail}")
    click.echo(f"Random round trips: {random_passed}/{num_tests} passed")

    if verbose:
        click.echo("")
        click.echo(format_results_table(results))

    if json_path:
        path = export_to_json(results, json_path)
        click.echo(f"\nJSON report: {path}")

    total_passed = kat_passed + random_passed
    total_tests = len(FIPS_197_TEST_VECTORS) + num_tests

    click.echo("")
    if total_passed == total_tests:
        click.echo(f"VALIDATION PASSED: All {total_tests} tests passed")
        sys.exit(0)
    else:
        click.echo(f"VALIDATION FAILED: {total_tests - total_passed} failures")
        sys.exit(1)


if __name__ == "__main__":
    main()
