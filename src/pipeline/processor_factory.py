# src/pipeline/processor_factory.py — v1
"""Processor factory — load the configured domain processor by class path.

Failing to load the processor is a setup error: it aborts the run before
any domain is touched.
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING

from neuroreport.core.errors import ProcessorLoadError
from neuroreport.pipeline.plugin_kit.base_processor import BaseDomainProcessor

if TYPE_CHECKING:
    from neuroreport.config.settings import Settings

logger = logging.getLogger(__name__)


def load_processor(class_path: str) -> BaseDomainProcessor:
    """Import and instantiate a processor from a dotted class path.

    Args:
        class_path: e.g. 'neuroreport.processors.quarto_section.QuartoSectionProcessor'

    Returns:
        Instantiated BaseDomainProcessor subclass.

    Raises:
        ProcessorLoadError: If the path is invalid, the import fails, or the
            class is not a BaseDomainProcessor.
    """
    module_path, _, class_name = class_path.rpartition(".")
    if not module_path or not class_name:
        raise ProcessorLoadError(f"Invalid class path: {class_path!r}")

    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        raise ProcessorLoadError(f"Cannot import module '{module_path}': {exc}") from exc

    cls = getattr(module, class_name, None)
    if cls is None:
        raise ProcessorLoadError(f"Class '{class_name}' not found in '{module_path}'")
    if not (isinstance(cls, type) and issubclass(cls, BaseDomainProcessor)):
        raise ProcessorLoadError(f"'{class_path}' is not a BaseDomainProcessor")

    processor = cls()
    logger.debug("Loaded processor %s v%s", processor.name, processor.version)
    return processor


def create_processor(settings: Settings) -> BaseDomainProcessor:
    """Instantiate the processor named by PROCESSOR_CLASS."""
    return load_processor(settings.processor_class)
