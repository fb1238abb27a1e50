# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""Global logger instance for Clapkit."""
import logging

logger: logging.Logger = logging.getLogger("clapkit")
