"""Staging of the resource executables into a scratch bin directory."""

from __future__ import annotations

import os
import shutil
import stat
from dataclasses import dataclass
from pathlib import Path

import structlog

from harness.config import AcceptanceSettings
from harness.exceptions import HarnessError

logger = structlog.get_logger(__name__)

S3_OUT_NAME = "s3-out"
_EXECUTABLE_BITS = stat.S_IRWXU | stat.S_IRWXG | stat.S_IRWXO


@dataclass(frozen=True)
class ResourceExecutables:
    bin_dir: Path
    check: Path
    in_: Path
    out: Path
    s3_out: Path


def copy_file_contents(src: Path, dst: Path) -> None:
    """Copy `src` into `dst`, creating or truncating it, and sync to disk.

    Errors raised while closing `dst` are propagated.
    """
    with open(src, "rb") as source_file:
        with open(dst, "wb") as destination:
            shutil.copyfileobj(source_file, destination)
            destination.flush()
            os.fsync(destination.fileno())


def _stage(src: Path, dst: Path, label: str) -> Path:
    if not src.is_file():
        raise HarnessError(f"{label} executable not found at {src}")
    copy_file_contents(src, dst)
    dst.chmod(_EXECUTABLE_BITS)
    logger.debug("harness.executable_staged", label=label, source=str(src), path=str(dst))
    return dst


def prepare_executables(settings: AcceptanceSettings, bin_dir: Path) -> ResourceExecutables:
    """Stage check/in/out and the s3-out helper `out` shells out to."""

    bin_dir.mkdir(parents=True, exist_ok=True)
    check = _stage(settings.check_path, bin_dir / "check", "check")
    in_ = _stage(settings.in_path, bin_dir / "in", "in")
    out = _stage(settings.out_path, bin_dir / "out", "out")
    # out locates s3-out next to itself.
    s3_out = _stage(settings.s3_out_location, out.parent / S3_OUT_NAME, S3_OUT_NAME)
    return ResourceExecutables(bin_dir=bin_dir, check=check, in_=in_, out=out, s3_out=s3_out)


def cleanup_executables(bin_dir: Path) -> None:
    shutil.rmtree(bin_dir, ignore_errors=True)
