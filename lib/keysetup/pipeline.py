"""Ordered execution of fallible setup steps."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Optional


class FailureKind(Enum):
    """Why a step failed."""
    INPUT = 'input'          # interactive input stream
    DIRECTORY = 'directory'  # creating the SSH directory
    LAUNCH = 'launch'        # key generator could not be started
    KEYGEN = 'keygen'        # key generator exited non-zero
    READ = 'read'            # reading a key file
    APPEND = 'append'        # opening or writing authorized_keys
    EXISTS = 'exists'        # operator declined to overwrite a key


@dataclass
class StepResult:
    """Outcome of a single step.

    Example:
        result = StepResult.failure(FailureKind.KEYGEN, 'boom')
        if not result.ok:
            print(result.message)
    """
    ok: bool
    kind: Optional[FailureKind] = None
    message: str = ''
    value: Any = None

    @classmethod
    def success(cls, value: Any = None, message: str = '') -> 'StepResult':
        return cls(ok=True, message=message, value=value)

    @classmethod
    def failure(cls, kind: FailureKind, message: str) -> 'StepResult':
        return cls(ok=False, kind=kind, message=message)


Step = Callable[[], StepResult]


def run_steps(steps: Iterable[Step]) -> StepResult:
    """Run steps in order, stopping at the first failure.

    Steps after a failure are never called.

    Args:
        steps: Zero-argument callables returning a StepResult

    Returns:
        The first failing result, or the last successful one
    """
    result = StepResult.success()
    for step in steps:
        result = step()
        if not result.ok:
            return result
    return result
