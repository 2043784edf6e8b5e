"""Acceptance suite setup and teardown."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import IO, Any, Optional

import structlog

from harness.config import AcceptanceSettings, get_settings
from harness.executables import ResourceExecutables, cleanup_executables, prepare_executables
from harness.logging import configure_logging
from harness.sanitizer import Sanitizer
from pivnet.client import PivnetClient

logger = structlog.get_logger(__name__)


class AcceptanceSuite:
    """Everything a scenario needs: settings, a sanitized sink, a client and executables.

    `setup` must run before any attribute is used. Configuration problems
    surface from `setup` and are fatal for the whole suite.
    """

    def __init__(self, settings: Optional[AcceptanceSettings] = None) -> None:
        self._settings = settings
        self.sanitizer: Optional[Sanitizer] = None
        self.client: Optional[PivnetClient] = None
        self.executables: Optional[ResourceExecutables] = None
        self._bin_dir: Optional[Path] = None

    @property
    def settings(self) -> AcceptanceSettings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    def setup(self, sink: IO[Any], *, bin_dir: Optional[Path] = None) -> "AcceptanceSuite":
        settings = self.settings

        self.sanitizer = Sanitizer(settings.secret_mapping(), sink)
        configure_logging(self.sanitizer)
        logger.info("suite.sanitizing_output")

        self.client = PivnetClient(settings.client_config())
        logger.info("suite.client_created", endpoint=settings.endpoint, product_slug=settings.product_slug)

        self._bin_dir = bin_dir if bin_dir is not None else Path(tempfile.mkdtemp(prefix="pivnet_resource_"))
        self.executables = prepare_executables(settings, self._bin_dir)
        logger.info("suite.executables_prepared", bin_dir=str(self._bin_dir))
        return self

    def teardown(self) -> None:
        if self.client is not None:
            self.client.close()
            self.client = None
        if self._bin_dir is not None:
            cleanup_executables(self._bin_dir)
            self._bin_dir = None
        self.executables = None

    def __enter__(self) -> "AcceptanceSuite":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.teardown()
