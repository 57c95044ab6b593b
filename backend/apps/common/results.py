# apps/common/results.py

from dataclasses import dataclass, field
from typing import Any


class Outcome:
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class BatchItemResult:
    """Outcome of one item inside a batch operation."""
    item_id: Any
    outcome: str
    detail: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.item_id,
            "outcome": self.outcome,
            "detail": self.detail,
        }


@dataclass
class BatchResult:
    """
    Itemized result of a best-effort batch.
    A failed item never aborts the items after it.
    """
    items: list[BatchItemResult] = field(default_factory=list)

    def success(self, item_id: Any, detail: str = "") -> None:
        self.items.append(BatchItemResult(item_id, Outcome.SUCCESS, detail))

    def skipped(self, item_id: Any, detail: str = "") -> None:
        self.items.append(BatchItemResult(item_id, Outcome.SKIPPED, detail))

    def failed(self, item_id: Any, detail: str = "") -> None:
        self.items.append(BatchItemResult(item_id, Outcome.FAILED, detail))

    def _count(self, outcome: str) -> int:
        return sum(1 for item in self.items if item.outcome == outcome)

    @property
    def succeeded_count(self) -> int:
        return self._count(Outcome.SUCCESS)

    @property
    def skipped_count(self) -> int:
        return self._count(Outcome.SKIPPED)

    @property
    def failed_count(self) -> int:
        return self._count(Outcome.FAILED)

    @property
    def ok(self) -> bool:
        return self.failed_count == 0

    @property
    def errors(self) -> list[BatchItemResult]:
        return [item for item in self.items if item.outcome == Outcome.FAILED]

    def to_dict(self) -> dict:
        return {
            "succeeded": self.succeeded_count,
            "skipped": self.skipped_count,
            "failed": self.failed_count,
            "items": [item.to_dict() for item in self.items],
        }
