"""Regeneration of per-product hook documentation trees."""

from .layout import product_output_dir, write_category_structure
from .regenerator import Regenerator
from .templates import TemplateRenderer

__all__ = ["Regenerator", "TemplateRenderer", "product_output_dir", "write_category_structure"]
