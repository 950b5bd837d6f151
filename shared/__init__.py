"""
Classicrypt Shared Module
=========================

Configuration, structured logging, console presentation, shared models
and modular/statistical math used by the classicrypt package.
"""

from shared.config import LabConfig, get_config

__all__ = ["LabConfig", "get_config"]
