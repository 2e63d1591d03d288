"""Backends for relation graph output generation (SVG)."""

from .svg_generator import ExportError, export_filename, generate_svg, save_svg_file

__all__ = ["ExportError", "export_filename", "generate_svg", "save_svg_file"]
