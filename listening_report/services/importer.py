"""Import of streaming history export batches into the play-event store"""
import json
import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import ValidationError

from listening_report.models.play_event import PlayEventRecord
from listening_report.services.storage import StorageService

logger = logging.getLogger(__name__)


class ImportFileError(Exception):
    """A batch file could not be read or decoded"""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{os.path.basename(path)}: {reason}")
        self.path = path
        self.reason = reason


@dataclass
class ImportResult:
    """Outcome of one import run"""
    imported: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    records_inserted: int = 0


class ImportService:
    """Scans a directory of export batches and appends valid ones to the store"""

    def __init__(self, storage: StorageService, input_dir: str,
                 suffix: str = ".json", marker: str = "Streaming_History_Audio",
                 skip_imported: bool = True):
        self.storage = storage
        self.input_dir = input_dir
        self.suffix = suffix
        self.marker = marker
        self.skip_imported = skip_imported

    def is_batch_name(self, name: str) -> bool:
        """Whether a file name looks like an audio history batch"""
        return name.endswith(self.suffix) and self.marker in name

    def discover(self) -> List[str]:
        """Paths of candidate batch files, sorted by name. Nothing is opened here."""
        if not os.path.isdir(self.input_dir):
            raise FileNotFoundError(f"Input directory not found: {self.input_dir}")

        candidates = []
        for name in sorted(os.listdir(self.input_dir)):
            path = os.path.join(self.input_dir, name)
            if not os.path.isfile(path):
                logger.info(f"Skipping {name}: not a regular file")
                continue
            if not self.is_batch_name(name):
                logger.info(f"Skipping {name}: not an audio history batch")
                continue
            candidates.append(path)
        return candidates

    def load_file(self, path: str) -> List[PlayEventRecord]:
        """
        Decode one batch file.

        Records that fail validation are dropped with a warning.

        Raises:
            ImportFileError: the file is unreadable, not JSON, or not a JSON array
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                content = f.read()
        except OSError as e:
            raise ImportFileError(path, f"unreadable ({e})") from e
        except UnicodeDecodeError as e:
            raise ImportFileError(path, f"invalid JSON ({e})") from e

        # Empty content is an empty batch, not a decode failure
        if not content.strip():
            return []

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ImportFileError(path, f"invalid JSON ({e})") from e

        if not isinstance(data, list):
            raise ImportFileError(path, f"expected a JSON array, got {type(data).__name__}")

        records = []
        for index, raw in enumerate(data):
            try:
                records.append(PlayEventRecord.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Dropping record {index} of {os.path.basename(path)}: {e.error_count()} validation error(s)")
                logger.debug(str(e))
        return records

    def import_file(self, path: str, result: ImportResult, already_imported: Optional[set] = None) -> None:
        """Import a single batch file, recording the outcome in result"""
        name = os.path.basename(path)
        if already_imported is not None and name in already_imported:
            logger.info(f"Skipping {name}: already imported")
            result.skipped.append(name)
            return

        try:
            records = self.load_file(path)
        except ImportFileError as e:
            logger.error(f"Skipping {e}")
            result.failed.append(name)
            return

        if not records:
            logger.warning(f"Skipping {name}: no valid play events")
            result.skipped.append(name)
            return

        result.records_inserted += self.storage.append(records, source_file=name)
        result.imported.append(name)

    def import_all(self) -> ImportResult:
        """Import every batch file in the input directory"""
        result = ImportResult()
        already_imported = self.storage.imported_files() if self.skip_imported else None
        paths = self.discover()
        logger.info(f"Found {len(paths)} batch file(s) in {self.input_dir}")

        for path in paths:
            self.import_file(path, result, already_imported)

        logger.info(
            f"Import finished: {len(result.imported)} imported, {len(result.skipped)} skipped, "
            f"{len(result.failed)} failed, {result.records_inserted} play events stored"
        )
        return result
