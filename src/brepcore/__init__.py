# -*- coding: utf-8 -*-
from importlib.metadata import PackageNotFoundError, version

from loguru import logger

try:
    __version__ = version("brepcore")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

# library code stays quiet unless the application opts in
logger.disable("brepcore")
