"""
StayPlaces API: Flat-File Places Repository
============================================

What:  Reads and writes the single JSON document holding every place.
How:   `load()` parses the whole array; `save()` serializes the whole array
       to a sibling temp file and renames it over the original.
Who:   Used only by PlaceService (and the health check).
When:  At least once per request; nothing is cached between calls.

Concurrency:
    `mutation()` serializes read-modify-write cycles inside this process.
    Separate processes writing the same file can still overwrite each
    other's changes (last writer wins).

Document layout:
    [
        {"_id": "9f2c...", "title": "...", "address": {...}, "images": [...], ...},
        ...
    ]
"""

import asyncio
import json
import logging
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List, Optional

import aiofiles
import aiofiles.os

from stayplaces.config import settings
from stayplaces.exceptions import StorageError

logger = logging.getLogger(__name__)

Place = Dict[str, Any]


class PlaceRepository:
    """
    Read/write abstraction over the places JSON file.

    The file is the single source of truth. Each `load()` re-reads it from
    disk and each `save()` replaces it entirely; there are no partial
    updates and no append log.
    """

    def __init__(self, path: Optional[str] = None):
        """
        Args:
            path: Override the default file location (used in tests).
                  If None, uses settings.places_file.
        """
        self.path = Path(path or settings.places_file)
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def mutation(self) -> AsyncIterator[None]:
        """
        Hold the in-process write lock for one read-modify-write cycle.

        Usage:
            async with repository.mutation():
                places = await repository.load()
                places.append(new_place)
                await repository.save(places)
        """
        async with self._lock:
            yield

    async def load(self) -> List[Place]:
        """
        Read and parse the whole places document.

        Returns:
            The list of place records, in stored order.

        Raises:
            StorageError if the file is missing or unreadable, is not valid
            JSON, or does not hold a JSON array.
        """
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                raw = await f.read()
        except OSError as e:
            logger.error("Failed to read places file %s: %s", self.path, str(e))
            raise StorageError(context={"path": str(self.path), "os_error": str(e)})

        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.error("Places file %s is not valid JSON: %s", self.path, str(e))
            raise StorageError(context={"path": str(self.path), "parse_error": str(e)})

        if not isinstance(data, list):
            logger.error(
                "Places file %s holds a %s, expected an array",
                self.path,
                type(data).__name__,
            )
            raise StorageError(
                context={"path": str(self.path), "parse_error": "top-level value is not an array"}
            )

        return data

    async def save(self, places: List[Place]) -> None:
        """
        Serialize the whole sequence and replace the places file with it.

        How:     Writes to `<name>.<random>.tmp` in the same directory, then
                 renames it over the target, so readers only ever see a
                 complete document.

        Raises:
            StorageError on any OS error (the temp file is removed).
        """
        content = json.dumps(places, ensure_ascii=False, indent=2)
        tmp_path = self.path.with_name(f"{self.path.name}.{uuid.uuid4().hex}.tmp")

        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(content)
            await aiofiles.os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error("Failed to write places file %s: %s", self.path, str(e))
            await self._discard(tmp_path)
            raise StorageError(context={"path": str(self.path), "os_error": str(e)})

        logger.debug("Places file written: %s (%d records)", self.path, len(places))

    async def ensure_exists(self) -> bool:
        """
        Create an empty places document if none exists yet.

        When:    Application startup, when settings.create_places_file is on.
        Returns: True if a new file was created, False if one was already there.
        """
        if await aiofiles.os.path.exists(self.path):
            return False

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Cannot create directory for %s: %s", self.path, str(e))
            raise StorageError(context={"path": str(self.path), "os_error": str(e)})

        await self.save([])
        logger.info("Created empty places file: %s", self.path.resolve())
        return True

    async def _discard(self, tmp_path: Path) -> None:
        """Best-effort removal of a leftover temp file."""
        try:
            if await aiofiles.os.path.exists(tmp_path):
                await aiofiles.os.remove(tmp_path)
        except OSError as e:
            logger.warning("Failed to remove temp file %s: %s", tmp_path, str(e))


# ── Singleton Instance ────────────────────────────────────────────────────
place_repository = PlaceRepository()
