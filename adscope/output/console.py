"""
AdScope Console Output
=======================

Rich-based console display for rendered advertisement reports.

Reports are printed verbatim (no markup) so the text on screen is
exactly the text block the report produced. JSON mode prints one
record per line for piping into other tools. A per-vendor tally is
kept here, in the presentation layer, for the end-of-run summary.

References:
    - Rich library: https://github.com/Textualize/rich
    - AdScope Console: shared.console.ScopeConsole
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Optional

from shared.console import ScopeConsole

from adscope.core.models import ManufacturerSection

if TYPE_CHECKING:
    from adscope.core.report import AdvertisementReport

NO_MANUFACTURER = "(no manufacturer data)"


class AdScopeConsoleOutput:
    """Console display for AdScope reports.

    Usage::

        output = AdScopeConsoleOutput()
        output.display_report(report)
        output.display_summary()

    Args:
        console: ScopeConsole instance. Creates a new one if None.
        json_lines: Print records as JSON lines instead of text blocks.
    """

    def __init__(
        self,
        console: Optional[ScopeConsole] = None,
        *,
        json_lines: bool = False,
    ) -> None:
        self._console = console or ScopeConsole()
        self._json_lines = json_lines
        self._vendor_counts: Counter[str] = Counter()

    @property
    def json_lines(self) -> bool:
        return self._json_lines

    @property
    def vendor_counts(self) -> Counter[str]:
        return self._vendor_counts

    def display_report(self, report: AdvertisementReport) -> None:
        """Print one report and add it to the vendor tally."""
        vendor = report.record.vendor_display
        self._vendor_counts[vendor if vendor is not None else NO_MANUFACTURER] += 1

        if self._json_lines:
            self._console.plain(report.record.model_dump_json())
        else:
            self._console.blank()
            self._console.plain(report.text)

    def display_manufacturer(self, section: ManufacturerSection) -> None:
        """Print a standalone manufacturer-data decode."""
        if self._json_lines:
            self._console.plain(section.parsed.model_dump_json())
            return

        parsed = section.parsed
        lines = [f"Manufacturer Data ({section.byte_count} bytes):"]
        lines.extend(section.hexdump.splitlines())
        lines.extend(f"  {line}" for line in parsed.result.lines())
        lines.append(f"Manufacturer: {parsed.vendor_display}")
        self._console.plain("\n".join(lines))

    def display_summary(self) -> None:
        """Show how many reports were rendered per vendor."""
        if self._json_lines:
            return
        total = sum(self._vendor_counts.values())
        self._console.blank()
        if not total:
            self._console.warning("No advertisements received")
            return
        rows = [
            (vendor, count)
            for vendor, count in sorted(
                self._vendor_counts.items(), key=lambda item: (-item[1], item[0])
            )
        ]
        self._console.table(
            "Advertisements by Vendor",
            ["Vendor", "Reports"],
            rows,
            caption=f"{total} advertisement(s)",
            styles=["bold", "bright_white"],
        )
