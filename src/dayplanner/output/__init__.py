"""Output generation for plans (PDF, text)."""

from dayplanner.output.debug_generator import DebugGenerator
from dayplanner.output.pdf_generator import PDFGenerator

__all__ = [
    "DebugGenerator",
    "PDFGenerator",
]
