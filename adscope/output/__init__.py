"""
AdScope Output
===============

Modules:
    hexdump  -- canonical hex + ASCII dump
    console  -- Rich-based console display of reports
"""

from adscope.output.console import AdScopeConsoleOutput
from adscope.output.hexdump import dump

__all__ = [
    "AdScopeConsoleOutput",
    "dump",
]
