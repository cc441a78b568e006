"""Listing the processes of a container with ps."""

from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass, field
from typing import Iterable, Sequence

_PS_ARGS_RE = re.compile(r"\s+([^\s]*)=\s*(PID[^\s]*)", re.ASCII)
_ASCII_SPACE_RE = re.compile(r"[\t\n\f\r ]+")
_INT_RE = re.compile(r"[+-]?\d+")

_TAB_MINWIDTH = 20
_TAB_PADDING = 3


@dataclass
class ContainerTop:
    """The ps column titles and one row of values per process."""

    titles: list[str] = field(default_factory=list)
    processes: list[list[str]] = field(default_factory=list)

    def append_process(self, fields: Sequence[str]) -> None:
        """Add a process row, merging overhanging fields into the last column."""
        last = len(self.titles) - 1
        process = list(fields[:last])
        process.append(" ".join(fields[last:]))
        self.processes.append(process)


def ps_pids_arg(pids: Iterable[int]) -> str:
    """Return "-q" followed by the comma-separated PIDs, e.g. "-q1,2,3"."""
    return "-q" + ",".join(str(p) for p in pids)


def validate_ps_args(ps_args: str) -> None:
    """Reject ps arguments that rename a column to PID under another key."""
    for key, value in _PS_ARGS_RE.findall(ps_args):
        if key != "pid":
            raise ValueError(f'specifying "{key}={value}" is not allowed')


def fields_ascii(s: str) -> list[str]:
    """Split s on ASCII whitespace only."""
    return [f for f in _ASCII_SPACE_RE.split(s) if f]


def has_pid(procs: Iterable[int], pid: int) -> bool:
    """Tell whether pid is among procs."""
    return any(int(p) == pid for p in procs)


def parse_ps_output(output: bytes | str, procs: Sequence[int]) -> ContainerTop:
    """Keep the rows of ps output that belong to the given PIDs.

    Thread rows (PID "-") are kept when they follow a kept process row.
    """
    if isinstance(output, bytes):
        output = output.decode()
    lines = output.split("\n")
    top = ContainerTop(titles=fields_ascii(lines[0]))

    try:
        pid_index = top.titles.index("PID")
    except ValueError:
        raise ValueError("Couldn't find PID field in ps output") from None

    prev_contained = False
    for line in lines[1:]:
        if not line:
            continue
        fields = fields_ascii(line)
        raw_pid = fields[pid_index]
        if raw_pid == "-":
            if prev_contained:
                top.append_process(fields)
            continue
        if not _INT_RE.fullmatch(raw_pid):
            raise ValueError(f"Unexpected pid '{raw_pid}': invalid syntax")
        if has_pid(procs, int(raw_pid)):
            prev_contained = True
            top.append_process(fields)
            continue
        prev_contained = False
    return top


def _run(args: list[str]) -> subprocess.CompletedProcess:
    return subprocess.run(["ps", *args], capture_output=True, check=True)


def run_ps(ps_args: str, pids: Sequence[int]) -> ContainerTop | None:
    """Run ps (default "-ef") limited to pids and parse its output.

    Returns None when ps cannot run and gives no reason on stderr; raises
    RuntimeError with the first stderr line when it does give one.
    """
    if not ps_args:
        ps_args = "-ef"
    validate_ps_args(ps_args)

    args = ps_args.split(" ")
    try:
        result = _run([*args, ps_pids_arg(pids)])
    except (subprocess.CalledProcessError, OSError):
        # some ps options (such as f) cannot be combined with q
        try:
            result = _run(args)
        except subprocess.CalledProcessError as exc:
            first = (exc.stderr or b"").split(b"\n", 1)[0]
            if first:
                raise RuntimeError(first.decode(errors="replace")) from exc
            return None
        except OSError:
            return None
    return parse_ps_output(result.stdout, list(pids))


def _tabwrite(rows: Sequence[Sequence[str]], minwidth: int, padding: int) -> str:
    lines = [list(r) for r in rows]
    out: list[str] = []
    widths: list[int] = []

    def write(lo: int, hi: int) -> None:
        for line in lines[lo:hi]:
            out.append(
                "".join(
                    cell.ljust(widths[j]) if j < len(widths) else cell
                    for j, cell in enumerate(line)
                )
            )

    def fmt(lo: int, hi: int) -> None:
        column = len(widths)
        this = lo
        while this < hi:
            if column >= len(lines[this]) - 1:
                this += 1
                continue
            write(lo, this)
            lo = this
            width = minwidth
            while this < hi and column < len(lines[this]) - 1:
                width = max(width, len(lines[this][column]) + padding)
                this += 1
            widths.append(width)
            fmt(lo, this)
            widths.pop()
            lo = this
        write(lo, hi)

    fmt(0, len(lines))
    return "".join(line + "\n" for line in out)


def format_top(top: ContainerTop) -> str:
    """Render the process table as aligned text columns."""
    return _tabwrite([top.titles, *top.processes], _TAB_MINWIDTH, _TAB_PADDING)