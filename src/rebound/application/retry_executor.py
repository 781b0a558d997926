"""Retry executor - drives a command through repeated attempts"""

from __future__ import annotations

import logging
import shlex
from typing import Callable, List, Optional, Sequence

from tenacity import RetryCallState, Retrying, retry_if_result

from rebound.domain.backoff.base import GIVE_UP, BackoffEngine
from rebound.domain.config.retry import RetryConfig
from rebound.domain.errors import LaunchError
from rebound.domain.models.retry_result import RetryOutcome, RetryResult
from rebound.infrastructure.clock import Clock, SystemClock
from rebound.infrastructure.runner.base import CommandRunner

logger = logging.getLogger(__name__)

Classifier = Callable[[int], bool]


class RetryExecutor:
    """Runs a command until it succeeds or the backoff engine gives up"""

    def __init__(self, command_runner: CommandRunner, clock: Optional[Clock] = None):
        """Initialize retry executor

        Args:
            command_runner: Runs the command and returns its exit code
            clock: Time source and sleeper (default: wall clock)
        """
        self.command_runner = command_runner
        self.clock = clock or SystemClock()

    def run(
        self,
        command: Sequence[str],
        classifier: Classifier,
        backoff_engine: BackoffEngine,
        options: Optional[RetryConfig] = None,
    ) -> RetryResult:
        """Retry a command

        Args:
            command: Program and arguments
            classifier: Maps an exit code to success (True) or failure
            backoff_engine: Fresh engine for this retry sequence
            options: dry_run / skip_delay / launch_error_policy

        Returns:
            RetryResult, with gave_up=True when the engine gave up

        Raises:
            LaunchError: If the command cannot be started and the policy is "raise"
        """
        loop = _RetryLoop(
            command=list(command),
            classifier=classifier,
            engine=backoff_engine,
            options=options or RetryConfig(),
            runner=self.command_runner,
            clock=self.clock,
        )
        return loop.execute()


class _RetryLoop:
    """State of a single run() call

    tenacity drives the loop: retry_if_result classifies each outcome, the
    stop and wait hooks share one engine.failure() call per failed attempt,
    and the sleep hook either sleeps or advances the virtual clock.
    """

    def __init__(
        self,
        command: List[str],
        classifier: Classifier,
        engine: BackoffEngine,
        options: RetryConfig,
        runner: CommandRunner,
        clock: Clock,
    ):
        self.command = command
        self.classifier = classifier
        self.engine = engine
        self.options = options
        self.runner = runner
        self.clock = clock

        self.attempt = 0
        self.virtual_time = clock.now()
        self.delays: List[float] = []
        self.gave_up = False
        self._decided_attempt = 0
        self._delay = 0.0

    @property
    def display_command(self) -> str:
        return shlex.join(self.command)

    def execute(self) -> RetryResult:
        retrying = Retrying(
            retry=retry_if_result(lambda outcome: not outcome.classified_success),
            stop=self._should_give_up,
            wait=self._next_delay,
            sleep=self._sleep,
            before_sleep=self._log_delay,
            retry_error_callback=self._give_up,
        )
        outcome: RetryOutcome = retrying(self._attempt)

        if not self.gave_up:
            logger.debug(f"Command successful (exit_code={outcome.exit_code})")
        return RetryResult(
            success=not self.gave_up,
            attempts=self.attempt,
            exit_code=outcome.exit_code,
            gave_up=self.gave_up,
            dry_run=self.options.dry_run,
            delays=self.delays,
        )

    def _attempt(self) -> RetryOutcome:
        self.attempt += 1
        if self.options.dry_run:
            logger.info(f"[DRY-RUN] Executing command {self.display_command} (attempt {self.attempt}) ...")
            # A simulated attempt never succeeds
            return RetryOutcome(attempt=self.attempt, exit_code=None, classified_success=False)

        logger.info(f"Executing command {self.display_command} (attempt {self.attempt}) ...")
        try:
            exit_code = self.runner.execute(self.command)
        except LaunchError as e:
            if self.options.launch_error_policy == "raise":
                logger.error(f"{e}, not retrying")
                raise
            logger.error(f"{e}, counting as a failed attempt")
            return RetryOutcome(
                attempt=self.attempt,
                exit_code=None,
                classified_success=False,
                launch_error=e.reason,
            )
        return RetryOutcome(
            attempt=self.attempt,
            exit_code=exit_code,
            classified_success=self.classifier(exit_code),
        )

    def _consult_engine(self, retry_state: RetryCallState) -> float:
        # stop and wait both need the decision; ask the engine once per attempt
        if self._decided_attempt != retry_state.attempt_number:
            timestamp = self.virtual_time if self.options.skip_delay else self.clock.now()
            self._delay = self.engine.failure(timestamp)
            self._decided_attempt = retry_state.attempt_number
        return self._delay

    def _should_give_up(self, retry_state: RetryCallState) -> bool:
        return self._consult_engine(retry_state) == GIVE_UP

    def _next_delay(self, retry_state: RetryCallState) -> float:
        return max(self._consult_engine(retry_state), 0.0)

    def _sleep(self, seconds: float) -> None:
        seconds = float(seconds)  # tenacity passes a DoSleep
        self.delays.append(seconds)
        if self.options.skip_delay:
            self.virtual_time += seconds
            return
        self.clock.sleep(seconds)

    def _log_delay(self, retry_state: RetryCallState) -> None:
        outcome: RetryOutcome = retry_state.outcome.result()
        logger.warning(
            f"Command failed ({self._describe(outcome)}), delaying {self._delay:g} second(s) "
            f"before the next attempt ..."
        )

    def _give_up(self, retry_state: RetryCallState) -> RetryOutcome:
        self.gave_up = True
        outcome: RetryOutcome = retry_state.outcome.result()
        logger.error(f"Command failed ({self._describe(outcome)}), giving up")
        if self.options.dry_run:
            logger.info("Dry run finished by giving up, as expected: simulated attempts never succeed")
        return outcome

    @staticmethod
    def _describe(outcome: RetryOutcome) -> str:
        if outcome.launch_error is not None:
            return f"launch error: {outcome.launch_error}"
        if outcome.exit_code is None:
            return "simulated"
        return f"exit_code={outcome.exit_code}"
