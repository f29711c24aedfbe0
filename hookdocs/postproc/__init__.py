"""Post-processing of generated hook documentation."""

from .category_index import CategoryIndexGenerator
from .enhancer import EnhancementReport, Enhancer, HookCatalog

__all__ = ["CategoryIndexGenerator", "EnhancementReport", "Enhancer", "HookCatalog"]
