"""
JSON File Storage Implementation

DESIGN DECISION: State is a single small JSON document
({budget, spent, transactions}) so a flat file is enough:
1. No database setup required
2. Users can open and back up the file themselves
3. Same layout the browser version kept in localStorage

TRADEOFFS:
- The whole file is rewritten on every save (fine for one month of expenses)
- Writes go to a temp file and are renamed over the target, so a crash
  mid-write leaves the previous state intact
"""

import json
import os
import tempfile
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Optional, Union

import structlog
from pydantic import ValidationError
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from upi_tracker.models.ledger import PersistedState, Transaction
from upi_tracker.services.storage.interface import (
    PersistenceUnavailable,
    StateStorageInterface,
)


logger = structlog.get_logger(__name__)


def _safe_decimal(value: Any) -> Decimal:
    """Missing or garbage totals read as zero, like `parsed.budget || 0`."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        number = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return Decimal("0")
    if not number.is_finite():
        return Decimal("0")
    return number


def state_from_json_dict(data: dict) -> PersistedState:
    """
    Build a PersistedState from a decoded JSON document.

    Malformed transaction rows are skipped rather than failing the load.
    """
    rows = data.get("transactions")
    if not isinstance(rows, list):
        rows = []

    transactions = []
    for row in rows:
        try:
            transactions.append(Transaction.model_validate(row))
        except ValidationError as e:
            logger.warning(
                "transaction_row_skipped",
                row=row,
                error=str(e),
            )
            continue

    budget = _safe_decimal(data.get("budget"))
    if budget < 0:
        budget = Decimal("0")

    return PersistedState(
        budget=budget,
        spent=_safe_decimal(data.get("spent")),
        transactions=transactions,
    )


class JsonFileStateStorage(StateStorageInterface):
    """
    Keeps the tracker state in one JSON file.

    Absent or unparseable files load as None (fresh start).
    """

    def __init__(
        self,
        path: Union[str, Path],
        retry_attempts: int = 3,
    ):
        self._path = Path(path)
        self._retry_attempts = retry_attempts

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[PersistedState]:
        """Read the state file; None when missing or corrupt."""
        if not self._path.exists():
            return None

        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceUnavailable(f"Failed to read state file: {e}")

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(
                "state_file_corrupt",
                path=str(self._path),
                error=str(e),
            )
            return None

        if not isinstance(data, dict):
            logger.warning(
                "state_file_corrupt",
                path=str(self._path),
                error=f"expected an object, got {type(data).__name__}",
            )
            return None

        try:
            return state_from_json_dict(data)
        except (ValidationError, TypeError, ArithmeticError) as e:
            logger.warning(
                "state_file_corrupt",
                path=str(self._path),
                error=str(e),
            )
            return None

    def save(self, state: PersistedState) -> None:
        """Atomically replace the state file, retrying transient I/O errors."""
        payload = json.dumps(state.to_json_dict(), indent=2, ensure_ascii=False)

        try:
            for attempt in Retrying(
                stop=stop_after_attempt(self._retry_attempts),
                wait=wait_exponential(multiplier=0.1, max=1),
                retry=retry_if_exception_type(OSError),
                reraise=True,
            ):
                with attempt:
                    self._write(payload)
        except OSError as e:
            raise PersistenceUnavailable(f"Failed to save state: {e}")

    def _write(self, payload: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            dir=str(self._path.parent),
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self._path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
