"""
Storage layer for crawled documents.
"""

from .document import PageDocument
from .exporter import DocumentExporter, JSONLExporter, ExportError

__all__ = ['PageDocument', 'DocumentExporter', 'JSONLExporter', 'ExportError']
