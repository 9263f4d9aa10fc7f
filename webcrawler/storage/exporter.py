"""
Export layer for crawled documents.
Appends one JSON document per line to a file in the output directory.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from .document import PageDocument


DEFAULT_OUTPUT_DIR = "output"
DEFAULT_FILENAME = "crawl.jsonl"


class ExportError(Exception):
    """Raised when a document cannot be serialized or written."""
    pass


class DocumentExporter:
    """Abstract base class for document sinks."""

    async def export_document(self, document: PageDocument):
        """Append one document to the sink."""
        raise NotImplementedError

    async def export_batch(self, documents: Iterable[PageDocument]):
        """Append many documents; same result as one export_document call per document."""
        for document in documents:
            await self.export_document(document)

    def get_stats(self) -> Dict[str, Any]:
        """Get export statistics."""
        raise NotImplementedError


class JSONLExporter(DocumentExporter):
    """Append-only JSON Lines exporter. Creates the directory and file when missing."""

    def __init__(self, output_dir: str = DEFAULT_OUTPUT_DIR, filename: str = DEFAULT_FILENAME):
        self.output_dir = Path(output_dir)
        self.filename = filename
        self.logger = logging.getLogger(__name__)
        self.stats = {
            'documents_exported': 0,
            'export_errors': 0,
            'bytes_written': 0
        }

    @property
    def output_path(self) -> Path:
        return self.output_dir / self.filename

    def dir_exists(self) -> bool:
        return self.output_dir.exists()

    def _ensure_output_dir(self):
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExportError(f"Failed to create output directory {self.output_dir}: {e}") from e

    def _serialize(self, document: PageDocument) -> str:
        try:
            return document.to_json()
        except (TypeError, ValueError) as e:
            raise ExportError(f"Failed to serialize document for {document.url}: {e}") from e

    def _append_lines(self, lines):
        self._ensure_output_dir()
        try:
            with open(self.output_path, 'a', encoding='utf-8') as f:
                for line in lines:
                    f.write(line + '\n')
        except OSError as e:
            self.stats['export_errors'] += 1
            raise ExportError(f"Failed to write to {self.output_path}: {e}") from e

    async def export_document(self, document: PageDocument):
        """Append one document as a JSON line."""
        line = self._serialize(document)
        self._append_lines([line])

        self.stats['documents_exported'] += 1
        self.stats['bytes_written'] += len(line.encode('utf-8')) + 1
        self.logger.debug(f"Exported document {document.url} to {self.output_path}")

    async def export_batch(self, documents: Iterable[PageDocument]):
        """Append many documents with a single file open."""
        lines = [self._serialize(document) for document in documents]
        self._append_lines(lines)

        self.stats['documents_exported'] += len(lines)
        self.stats['bytes_written'] += sum(len(line.encode('utf-8')) + 1 for line in lines)
        self.logger.debug(f"Exported {len(lines)} documents to {self.output_path}")

    async def export_json_array(self, documents: Iterable[PageDocument],
                                filename: Optional[str] = None) -> Path:
        """Write documents as a single pretty-printed JSON array, replacing the file."""
        self._ensure_output_dir()
        file_path = self.output_dir / (filename or Path(self.filename).with_suffix('.json').name)
        try:
            data = [document.to_dict() for document in documents]
            with open(file_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
        except (OSError, TypeError, ValueError) as e:
            raise ExportError(f"Failed to write {file_path}: {e}") from e

        self.logger.info(f"Exported {len(data)} documents to {file_path}")
        return file_path

    def clear_output_dir(self):
        """Remove the files (not subdirectories) in the output directory."""
        if not self.output_dir.exists():
            return
        try:
            for path in self.output_dir.iterdir():
                if path.is_file():
                    path.unlink()
        except OSError as e:
            raise ExportError(f"Failed to clear {self.output_dir}: {e}") from e

    def get_stats(self) -> Dict[str, Any]:
        return self.stats.copy()
