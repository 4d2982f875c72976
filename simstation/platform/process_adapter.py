"""IProcessRunner interface — abstraction for launching external programs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class CommandDescriptor:
    """Executable path plus ordered arguments. Carries no execution logic.

    The executable is not checked here; a missing binary surfaces as
    ``ProcessLaunchError`` from the runner.
    """

    executable: str
    arguments: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Accept any sequence but always store an immutable tuple
        object.__setattr__(self, "arguments", tuple(str(a) for a in self.arguments))

    @property
    def argv(self) -> list[str]:
        return [self.executable, *self.arguments]


@dataclass(frozen=True)
class ProcessResult:
    stdout: bytes
    returncode: int

    @property
    def text(self) -> str:
        return self.stdout.decode("utf-8")


class IProcessRunner(ABC):
    """Runs a descriptor to completion.

    Implementations must drain stdout and stderr concurrently and raise
    ``ProcessStderrError`` whenever stderr is non-empty.
    """

    @abstractmethod
    async def run(self, descriptor: CommandDescriptor) -> ProcessResult: ...
