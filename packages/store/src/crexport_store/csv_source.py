"""CsvRowSource: the review comment table kept as a CSV file in the workspace.

Format: a header row followed by one row per comment. Free-text fields never
contain raw line breaks (they are escaped before they reach this layer), so
each comment occupies exactly one physical line.
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import AsyncIterator

import aiofiles

from crexport_store.base import BaseRowSource, SourceError
from crexport_store.models import CSV_COLUMNS, REQUIRED_COLUMNS

logger = logging.getLogger(__name__)


class CsvRowSource(BaseRowSource):
    """Reads and appends comment rows in a CSV file.

    The whole file is read in a single non-blocking call and then handed out
    row by row; comment tables are small enough that this never matters.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    async def _read_text(self) -> str:
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8-sig", newline="") as f:
                return await f.read()
        except FileNotFoundError:
            raise SourceError(f"Comment file not found: '{self.path}'")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceError(f"Could not read comment file '{self.path}': {e}")

    async def iter_raw_rows(self) -> AsyncIterator[dict]:
        text = await self._read_text()
        reader = csv.DictReader(io.StringIO(text), delimiter=",")

        try:
            header = [name.strip() for name in (reader.fieldnames or [])]
        except csv.Error as e:
            raise SourceError(f"Malformed header in '{self.path}': {e}")
        if not header:
            raise SourceError(f"Comment file '{self.path}' has no header row.")
        missing = REQUIRED_COLUMNS - set(header)
        if missing:
            raise SourceError(f"Comment file '{self.path}' is missing column(s): {', '.join(sorted(missing))}")
        reader.fieldnames = header

        count = 0
        try:
            for raw in reader:
                # Extra cells beyond the header land under the None key.
                if None in raw:
                    logger.debug("Ignoring %d extra cell(s) on line %d", len(raw[None]), reader.line_num)
                    raw.pop(None)
                count += 1
                yield {key: value if value is not None else "" for key, value in raw.items()}
        except csv.Error as e:
            raise SourceError(f"Malformed CSV in '{self.path}' near line {reader.line_num}: {e}")
        logger.debug("Read %d row(s) from %s", count, self.path)

    async def _existing_header(self) -> list[str] | None:
        if not self.exists():
            return None
        async with aiofiles.open(self.path, "r", encoding="utf-8-sig", newline="") as f:
            first_line = await f.readline()
        if not first_line.strip():
            return None
        return [name.strip() for name in next(csv.reader([first_line]))]

    async def append(self, values: dict) -> None:
        """Append one row, creating the file with the default header if needed.

        Columns follow the existing header; keys the header does not know are
        dropped.
        """
        header = await self._existing_header()
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        if header is None:
            header = list(CSV_COLUMNS)
            writer.writerow(header)
        writer.writerow(["" if values.get(col) is None else str(values.get(col)) for col in header])

        try:
            async with aiofiles.open(self.path, "a", encoding="utf-8", newline="") as f:
                await f.write(buf.getvalue())
        except OSError as e:
            raise SourceError(f"Could not write comment file '{self.path}': {e}")
