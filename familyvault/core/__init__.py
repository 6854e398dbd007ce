"""
Core module - Contains configuration, logging, crypto and file operations.
"""

from familyvault.core.config import VaultConfig
from familyvault.core.logging import get_secure_logger, SecureLogFilter

__all__ = ["VaultConfig", "get_secure_logger", "SecureLogFilter"]
