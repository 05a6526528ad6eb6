"""
AdScope Engine
===============

Orchestrates collectors, the advertisement report, and console output.

The engine follows a short pipeline per discovery event:
    1. Collection: a collector delivers a DiscoveryEvent
    2. Decode: the report builds an immutable AdvertisementRecord
    3. Output: the console prints the rendered block (or JSON line)

Events are handled one at a time as they arrive; nothing is retained
between them apart from the console's vendor tally.
"""

from __future__ import annotations

import asyncio
import signal
from pathlib import Path
from typing import Optional

from shared.config import AdScopeConfig
from shared.console import ScopeConsole
from shared.logger import ScopeLogger

from adscope.collectors.ble_collector import BLECollector
from adscope.collectors.replay import read_events
from adscope.core.models import DiscoveryEvent, ManufacturerSection
from adscope.core.report import AdvertisementReport
from adscope.decoders import manufacturer
from adscope.output import hexdump
from adscope.output.console import AdScopeConsoleOutput

logger = ScopeLogger("core.engine")


class AdScopeEngine:
    """Central orchestration for AdScope.

    Usage::

        engine = AdScopeEngine()
        await engine.scan(duration=10)
        engine.replay("capture.jsonl")
        engine.decode(bytes.fromhex("4c000215..."))

    Args:
        config: AdScope configuration. Uses defaults if None.
        console: ScopeConsole for output. Creates new if None.
        json_lines: Override ``scan.output_format`` from the config.
    """

    def __init__(
        self,
        config: Optional[AdScopeConfig] = None,
        console: Optional[ScopeConsole] = None,
        *,
        json_lines: Optional[bool] = None,
    ) -> None:
        self._config = config or AdScopeConfig()
        self._console = console or ScopeConsole()
        if json_lines is None:
            json_lines = self._config.scan.output_format == "json"
        self._output = AdScopeConsoleOutput(self._console, json_lines=json_lines)
        self._collector = BLECollector(scanning_mode=self._config.scan.scanning_mode)

    @property
    def output(self) -> AdScopeConsoleOutput:
        return self._output

    def handle_event(self, event: DiscoveryEvent) -> AdvertisementReport:
        """Decode, render, and display one discovery event."""
        report = AdvertisementReport.from_event(event)
        self._output.display_report(report)
        return report

    async def scan(self, duration: Optional[int] = None) -> int:
        """Scan live until *duration* elapses or SIGINT is received.

        Args:
            duration: Seconds to scan; ``None`` uses ``scan.duration`` from
                the config and ``0`` scans until interrupted.

        Returns:
            Number of advertisements rendered.

        Raises:
            CollectorError: The BLE backend is unavailable.
        """
        if duration is None:
            duration = self._config.scan.duration

        stop_event = asyncio.Event()
        loop = asyncio.get_running_loop()
        interrupted = False

        def _on_sigint() -> None:
            nonlocal interrupted
            interrupted = True
            stop_event.set()

        try:
            loop.add_signal_handler(signal.SIGINT, _on_sigint)
            handler_installed = True
        except (NotImplementedError, RuntimeError):
            # Windows event loops and non-main threads: KeyboardInterrupt still applies
            handler_installed = False

        if not self._output.json_lines:
            self._console.info(
                "Scanning for BLE advertisements"
                + (f" for {duration}s" if duration else " (Ctrl+C to stop)")
            )

        try:
            count = await self._collector.scan(
                self.handle_event, duration=duration, stop_event=stop_event
            )
        finally:
            if handler_installed:
                loop.remove_signal_handler(signal.SIGINT)

        if interrupted and not self._output.json_lines:
            self._console.plain("\nStopping scan.")
        if self._config.scan.show_summary:
            self._output.display_summary()
        return count

    def replay(self, path: str | Path) -> int:
        """Render every discovery event recorded in a JSON-lines file.

        Raises:
            ReplayError: The file is unreadable or a record is malformed.
        """
        count = 0
        with logger.timed(f"replay {path}"):
            for event in read_events(path):
                self.handle_event(event)
                count += 1
        if self._config.scan.show_summary:
            self._output.display_summary()
        return count

    def decode(self, raw: bytes) -> ManufacturerSection:
        """Decode and display a single manufacturer-data blob."""
        section = ManufacturerSection(
            parsed=manufacturer.parse(raw),
            hexdump=hexdump.dump(raw),
        )
        self._output.display_manufacturer(section)
        return section
