"""Planning how a container task is stopped."""

from __future__ import annotations

import re
from dataclasses import dataclass

_DURATION_SECONDS_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)")


@dataclass(frozen=True)
class StopStep:
    """One step of stopping a task.

    ``action`` is "kill" (send ``signal``), "resume" (unpause so the signal
    is delivered) or "wait" (wait for exit, for at most ``timeout`` seconds
    when it is set, otherwise without limit).
    """

    action: str
    signal: str | None = None
    timeout: float | None = None


def parse_stop_timeout(value: str) -> float:
    """Parse the --time value as a number of seconds."""
    if not _DURATION_SECONDS_RE.fullmatch(value):
        raise ValueError(f'time: invalid duration "{value}s"')
    return float(value)


def stop_steps(status: str, timeout: float) -> tuple[StopStep, ...]:
    """Return the steps that stop a task in the given status.

    Created and stopped tasks need nothing. With a positive timeout the task
    first gets SIGTERM and a bounded wait; the SIGKILL steps that follow are
    taken only if that wait runs out. Paused tasks are resumed after each
    signal so that it is delivered; once resumed they are not resumed again.
    """
    status = status.lower()
    if status in ("created", "stopped"):
        return ()
    paused = status in ("paused", "pausing")

    steps: list[StopStep] = []
    if timeout > 0:
        steps.append(StopStep("kill", signal="SIGTERM"))
        if paused:
            steps.append(StopStep("resume"))
            paused = False
        steps.append(StopStep("wait", timeout=timeout))

    steps.append(StopStep("kill", signal="SIGKILL"))
    if paused:
        steps.append(StopStep("resume"))
    steps.append(StopStep("wait"))
    return tuple(steps)