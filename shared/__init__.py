"""
AdScope Shared Module
======================

Configuration, structured logging, and console helpers shared by the
AdScope decoder, collectors, and CLI.
"""

from shared.config import AdScopeConfig, get_config

__all__ = ["AdScopeConfig", "get_config"]
