"""Retry loop configuration model."""

import re
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

_CODES_RE = re.compile(r"^\d+(,\d+)*$")


class RetryConfig(BaseModel):
    """Configuration for the retry loop.

    Attributes:
        retry_on: Exit codes that trigger a retry (everything else is success)
        success_on: Exit codes that mean success (everything else is retried)
        dry_run: Never execute the command, simulate a failing attempt instead
        skip_delay: Do not sleep, advance a virtual clock instead
        launch_error_policy: "raise" stops on a launch failure, "retry" counts it as a failed attempt
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    retry_on: Optional[List[int]] = None
    success_on: Optional[List[int]] = None
    dry_run: bool = False
    skip_delay: bool = False
    launch_error_policy: Literal["raise", "retry"] = "raise"

    @field_validator("retry_on", "success_on", mode="before")
    @classmethod
    def _parse_codes(cls, value: Union[None, str, int, List[int]]):
        """Accept "0,2"-style strings as well as lists"""
        if value is None or isinstance(value, list):
            return value
        if isinstance(value, int):
            return [value]
        text = str(value).replace(" ", "")
        if not _CODES_RE.match(text):
            raise ValueError(f"expected comma-separated exit codes, got {value!r}")
        return [int(code) for code in text.split(",")]
