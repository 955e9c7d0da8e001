"""JSON file implementation of LedgerStateRepository."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from cryptosim.core.exceptions import PersistenceError
from cryptosim.domain.models import LedgerState
from cryptosim.repositories import ledger_codec

logger = logging.getLogger(__name__)


class JsonFileLedgerStateRepository:
    """Stores the ledger state as a single JSON document."""

    def __init__(self, path: Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def save(self, state: LedgerState) -> None:
        """Write the state to a temp file, then atomically replace the target."""
        payload = ledger_codec.dumps(state)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=".ledger-", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise PersistenceError(f"Could not write ledger file {self._path}: {exc}") from exc
        logger.debug("Saved ledger state to %s", self._path)

    def load(self) -> Optional[LedgerState]:
        """Read the stored state; None if the file does not exist yet."""
        if not self._path.exists():
            return None
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Could not read ledger file {self._path}: {exc}") from exc
        return ledger_codec.loads(text)
