"""Usage stores: persistence hooks for the ledger state.

The ledger calls ``load()`` once at startup and ``save()`` on flush; stores
are never touched on individual increments.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional, Union

import aiofiles
import aiofiles.os
from pydantic import ValidationError

from lunanul.domains.usage.exceptions import UsageStoreError
from lunanul.domains.usage.protocols import UsageStoreProtocol
from lunanul.schemas.usage import LedgerState

logger = logging.getLogger(__name__)


class JsonFileUsageStore(UsageStoreProtocol):
    """Ledger state stored as a single JSON document on the local filesystem.

    Layout: ``{"counters": {feature: {feature, count, period_start,
    period_end}}, "history": {feature: [count, ...]}}``.

    Uses aiofiles for non-blocking file I/O. Writes go to a temporary
    sibling file which then replaces the target.
    """

    def __init__(self, path: Union[str, Path]):
        """Initialize the store.

        Args:
            path: JSON file to read and write. Parent directories are created on save.
        """
        self.path = Path(path)

    async def load(self) -> Optional[LedgerState]:
        """Read the persisted state; None if the file does not exist."""
        if not await aiofiles.os.path.exists(self.path):
            return None

        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                content = await f.read()
            return LedgerState.model_validate(json.loads(content))
        except json.JSONDecodeError as e:
            raise UsageStoreError(f"Invalid JSON at {self.path}: {e}")
        except ValidationError as e:
            raise UsageStoreError(f"Invalid usage state at {self.path}: {e}")
        except OSError as e:
            raise UsageStoreError(f"Failed to read usage state from {self.path}: {e}")

    async def save(self, state: LedgerState) -> None:
        """Write ``state`` to the file."""
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            if not await aiofiles.os.path.exists(self.path.parent):
                await asyncio.to_thread(self.path.parent.mkdir, parents=True, exist_ok=True)
            content = json.dumps(state.model_dump(mode="json"), indent=2)
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(content)
            await aiofiles.os.replace(tmp_path, self.path)
        except OSError as e:
            await self._discard(tmp_path)
            raise UsageStoreError(f"Failed to write usage state to {self.path}: {e}")
        logger.debug("Saved usage state to %s", self.path)

    async def _discard(self, tmp_path: Path) -> None:
        """Remove a leftover temporary file after a failed write."""
        try:
            if await aiofiles.os.path.exists(tmp_path):
                await aiofiles.os.remove(tmp_path)
        except OSError as e:
            logger.warning("Could not remove temporary file %s: %s", tmp_path, e)


class NullUsageStore(UsageStoreProtocol):
    """No-op store; usage lives only in memory."""

    async def load(self) -> Optional[LedgerState]:
        """Nothing persisted."""
        return None

    async def save(self, state: LedgerState) -> None:
        """Discard."""
        pass
