"""CLI interface for rebound"""

import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import click

from rebound.application.replay_simulator import DelayReplaySimulator
from rebound.application.retry_executor import RetryExecutor
from rebound.domain.backoff.factory import BackoffEngineFactory
from rebound.domain.config.backoff import Algorithm
from rebound.domain.errors import ReboundError
from rebound.domain.exit_codes import ExitCodeClassifier
from rebound.infrastructure.config.config_manager import ConfigManager
from rebound.infrastructure.event_parser import parse_replay_log
from rebound.infrastructure.runner.subprocess_runner import SubprocessCommandRunner

logger = logging.getLogger(__name__)

ALGORITHM_CHOICE = click.Choice([a.value for a in Algorithm], case_sensitive=False)

BACKOFF_PARAMS = (
    "min_delay",
    "max_delay",
    "max_attempts",
    "max_actual_duration",
    "jitter_factor",
    "consider_actual_delay",
    "delay",
    "delay_on_success",
    "initial_delay",
    "exponent_base",
    "increment",
    "decrement",
    "increase_factor",
    "decrease_factor",
)

ALGORITHM_SUMMARIES = {
    Algorithm.CONSTANT: "constant delay",
    Algorithm.EXPONENTIAL: "exponential",
    Algorithm.FIBONACCI: "fibonacci",
    Algorithm.LILD: "LILD (linear increase, linear decrease)",
    Algorithm.LIMD: "LIMD (linear increase, multiplicative decrease)",
    Algorithm.MILD: "MILD (multiplicative increase, linear decrease)",
    Algorithm.MIMD: "MIMD (multiplicative increase, multiplicative decrease)",
}


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    logging.getLogger().setLevel(level)


def _die(message: str, verbose: bool = False, exc: Optional[Exception] = None) -> None:
    """Exit with a user-friendly error message"""
    if exc is not None:
        logger.error(message, exc_info=verbose)
    else:
        logger.error(message)
    raise click.ClickException(message)


def backoff_options(func: Callable) -> Callable:
    """Attach the backoff parameter options shared by all commands"""
    options = [
        click.option("--min-delay", type=float, help="Floor applied to every delay (seconds)"),
        click.option("--max-delay", type=float, help="Ceiling applied to every delay (seconds)"),
        click.option("--max-attempts", type=int, help="Give up after this many failures (0 = never)"),
        click.option(
            "--max-actual-duration",
            type=float,
            help="Give up this many seconds after the first failure (0 = never)",
        ),
        click.option("--jitter-factor", type=float, help="Fraction of each delay randomized away (0-1)"),
        click.option(
            "--consider-actual-delay",
            is_flag=True,
            default=None,
            help="Count time elapsed since the previous attempt toward the delay",
        ),
        click.option("--delay", type=float, help="[constant] Delay after each failure"),
        click.option(
            "--delay-on-success",
            type=float,
            help="[constant, exponential, fibonacci] Delay after a success",
        ),
        click.option(
            "--initial-delay",
            type=float,
            help="[exponential, fibonacci, lild, limd, mild, mimd] Delay after the first failure",
        ),
        click.option("--exponent-base", type=float, help="[exponential] Growth base (default 2)"),
        click.option("--increment", type=float, help="[lild, limd] Added on each failure"),
        click.option("--decrement", type=float, help="[lild, mild] Subtracted on each success"),
        click.option("--increase-factor", type=float, help="[mild, mimd] Multiplier on each failure"),
        click.option("--decrease-factor", type=float, help="[limd, mimd] Multiplier on each success"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def retry_options(func: Callable) -> Callable:
    """Attach the retry loop options"""
    options = [
        click.option(
            "--retry-on",
            type=str,
            help="Comma-separated exit codes that trigger retry (default: any non-zero)",
        ),
        click.option(
            "--success-on",
            type=str,
            help="Comma-separated exit codes that mean success (default: 0)",
        ),
        click.option(
            "--skip-delay",
            "-D",
            is_flag=True,
            default=None,
            help="Do not actually sleep between attempts (useful with --dry-run)",
        ),
        click.option(
            "--dry-run",
            is_flag=True,
            default=None,
            help="Do not run the command; every simulated attempt fails",
        ),
        click.option(
            "--launch-error-policy",
            type=click.Choice(["raise", "retry"]),
            help="Stop (raise) or count as a failed attempt (retry) when the command cannot start",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _split_params(params: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Split click parameters into backoff and retry overrides"""
    backoff = {k: params.pop(k) for k in BACKOFF_PARAMS if k in params}
    retry = {
        "retry_on": params.pop("retry_on", None),
        "success_on": params.pop("success_on", None),
        "skip_delay": params.pop("skip_delay", None),
        "dry_run": params.pop("dry_run", None),
        "launch_error_policy": params.pop("launch_error_policy", None),
    }
    return backoff, retry


def _run_retry(ctx: click.Context, algorithm: Optional[str], command: Tuple[str, ...], params: Dict[str, Any]) -> None:
    verbose = ctx.obj.get("verbose", False)
    backoff_overrides, retry_overrides = _split_params(params)
    if algorithm:
        backoff_overrides["algorithm"] = algorithm

    try:
        config_manager = ConfigManager(config_path=ctx.obj.get("config_path"))
        config = config_manager.apply_overrides(backoff=backoff_overrides, retry=retry_overrides)
        engine = BackoffEngineFactory.create(config.backoff)
        classifier = ExitCodeClassifier.from_config(config.retry)
        if config.retry.dry_run and not (config.backoff.max_attempts or config.backoff.max_actual_duration):
            logger.warning("Dry run without --max-attempts or --max-actual-duration will never stop")

        logger.info(f"Retrying with {config.backoff.algorithm} backoff, classifier {classifier!r}")
        executor = RetryExecutor(SubprocessCommandRunner())
        result = executor.run(list(command), classifier, engine, config.retry)
    except ReboundError as e:
        _die(str(e), verbose=verbose, exc=e)
        return

    if not result.success:
        click.echo(result.message, err=True)
        sys.exit(1)
    click.echo(result.message)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .rebound.yml config file",
)
@click.pass_context
def cli(ctx, verbose: bool, config: Path):
    """rebound - retry a command with a custom backoff algorithm"""
    ctx.ensure_object(dict)
    setup_logging(verbose)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose


COMMAND_SETTINGS = {"allow_interspersed_args": False}


@cli.command(context_settings=COMMAND_SETTINGS)
@click.option("--algorithm", "-a", type=ALGORITHM_CHOICE, help="Backoff algorithm (default: from config)")
@backoff_options
@retry_options
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_context
def retry(ctx, algorithm: Optional[str], command: Tuple[str, ...], **params):
    """Retry a command with a custom backoff algorithm.

    COMMAND: program and arguments, e.g. rebound retry -a constant --delay 5 -- curl -f URL
    """
    _run_retry(ctx, algorithm, command, params)


def _make_algorithm_command(algorithm: Algorithm) -> click.Command:
    summary = ALGORITHM_SUMMARIES[algorithm]

    @click.pass_context
    def command_func(ctx, command: Tuple[str, ...], **params):
        _run_retry(ctx, algorithm.value, command, params)

    command_func.__doc__ = f"Retry a command with {summary} backoff."
    command_func = backoff_options(retry_options(command_func))
    command_func = click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)(command_func)
    return click.command(name=f"retry-{algorithm.value}", context_settings=COMMAND_SETTINGS)(command_func)


for _algorithm in Algorithm:
    cli.add_command(_make_algorithm_command(_algorithm))


@cli.command(name="show-delays")
@click.option("--algorithm", "-a", type=ALGORITHM_CHOICE, required=True, help="Backoff algorithm")
@click.option("--start-time", type=float, help="Virtual time of the first entry (default: now)")
@backoff_options
@click.argument("logs", nargs=-1, required=True)
@click.pass_context
def show_delays(ctx, algorithm: str, start_time: Optional[float], logs: Tuple[str, ...], **params):
    """Show the delays a history of failures/successes would produce.

    LOGS: 0 (failure) or 1 (success), each optionally followed by :TIMESTAMP
    or :+SECS, e.g. "0 0:+2 0:+4 1"
    """
    verbose = ctx.obj.get("verbose", False)
    backoff_params = {k: v for k, v in params.items() if v is not None}
    backoff_params["algorithm"] = algorithm

    try:
        events = parse_replay_log(logs)
        engine = BackoffEngineFactory.create(backoff_params)
        delays = DelayReplaySimulator(start_time=start_time).replay(events, engine)
    except ReboundError as e:
        _die(str(e), verbose=verbose, exc=e)
        return

    for delay in delays:
        click.echo(f"{delay:g}")


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
