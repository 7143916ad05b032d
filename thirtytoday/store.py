from __future__ import annotations

import logging
from pathlib import Path

from .models.archive import ArchiveDocument

logger = logging.getLogger(__name__)


def write_document(document: ArchiveDocument, path: Path | str) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(document.model_dump_json(indent=2), encoding="utf-8")
    logger.info("Wrote %d date bundles to %s", len(document.root), target)
    return target


def load_document(path: Path | str) -> ArchiveDocument:
    return ArchiveDocument.model_validate_json(Path(path).read_text(encoding="utf-8"))
