"""Shared CLI helpers: console and logger."""

from rich.console import Console

from relief_hub.utils.logger import get_logger

console = Console()
logger = get_logger("relief_hub.cli")
