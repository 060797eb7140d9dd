"""
Batch worker.

Runs several independent removal requests against one gateway. Each item
gets its own outcome; one item failing never affects another.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .errors import GatewayError
from .gateway import BackgroundRemovalGateway
from .schemas import RemovalRequest, RemovalResult

logger = logging.getLogger(__name__)


@dataclass
class BatchItem:
    request: RemovalRequest
    label: str = ""


@dataclass
class BatchOutcome:
    label: str
    result: Optional[RemovalResult] = None
    error: Optional[GatewayError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def process_batch(
    items: Iterable[BatchItem],
    gateway: BackgroundRemovalGateway,
    max_workers: int = 4,
) -> List[BatchOutcome]:
    """
    Process a batch of images concurrently.

    Returns one outcome per item, matching the input order.
    """
    items = list(items)

    def _run(item: BatchItem) -> BatchOutcome:
        logger.info("Processing batch item %s", item.label or "<unlabeled>")
        try:
            return BatchOutcome(label=item.label, result=gateway.remove_background(item.request))
        except GatewayError as exc:
            logger.warning("Batch item %s failed (%s): %s", item.label or "<unlabeled>", exc.kind, exc)
            return BatchOutcome(label=item.label, error=exc)

    if not items:
        return []
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(items)))) as pool:
        return list(pool.map(_run, items))
