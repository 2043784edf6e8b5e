"""Running resource executables over their stdin/stdout JSON protocol."""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Iterable, Mapping, Optional, Union

from harness.exceptions import HarnessError

logger = logging.getLogger(__name__)

TIMEOUT_RETURNCODE = -1


@dataclass(frozen=True)
class ResourceSession:
    command: list[str]
    returncode: int
    stdout: bytes
    stderr: bytes
    timed_out: bool = False

    def json(self) -> Any:
        try:
            return json.loads(self.stdout)
        except ValueError as exc:
            raise HarnessError(f"{self.command[0]} wrote non-JSON output: {self.stdout[:512]!r}") from exc


def _tee(sink: Optional[IO[Any]], data: bytes) -> None:
    if sink is None or not data:
        return
    sink.write(data.decode("utf-8", errors="replace"))
    flush = getattr(sink, "flush", None)
    if flush is not None:
        flush()


def run_resource(
    command: Iterable[Union[str, Path]],
    payload: Union[bytes, str],
    *,
    sink: Optional[IO[Any]] = None,
    env: Optional[Mapping[str, str]] = None,
    timeout: Optional[float] = None,
    cwd: Optional[Path] = None,
) -> ResourceSession:
    """Spawn `command`, feed it `payload` on stdin and collect its output.

    The process is always reaped and its pipes closed, including when
    writing the payload fails. On timeout it is killed and the session
    reports `TIMEOUT_RETURNCODE`.
    """

    args = [str(part) for part in command]
    data = payload.encode("utf-8") if isinstance(payload, str) else payload
    _tee(sink, b"input: " + data + b"\n")

    timed_out = False
    with subprocess.Popen(
        args,
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env=dict(env) if env is not None else None,
        cwd=str(cwd) if cwd is not None else None,
    ) as process:
        try:
            stdout, stderr = process.communicate(input=data, timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.warning("Resource %s timed out after %ss", args[0], timeout)
            process.kill()
            stdout, stderr = process.communicate()
            timed_out = True
        except BaseException:
            process.kill()
            raise
        returncode = TIMEOUT_RETURNCODE if timed_out else process.returncode

    _tee(sink, stderr)
    _tee(sink, stdout)
    return ResourceSession(
        command=args,
        returncode=returncode,
        stdout=stdout or b"",
        stderr=stderr or b"",
        timed_out=timed_out,
    )
