from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, Iterable, List

logger = logging.getLogger(__name__)


def _distinct(doc_ids: Iterable[str]) -> List[str]:
    seen: Dict[str, None] = {}
    for doc_id in doc_ids:
        seen.setdefault(doc_id, None)
    return list(seen)


def fetch_documents(
    db: Any,
    collection: str,
    doc_ids: Iterable[str],
    *,
    max_workers: int = 16,
) -> Dict[str, Any]:
    """
    Point-read documents by id with bounded concurrency.

    Each distinct id is read once. Results are keyed by document id, so callers
    never depend on completion order. Missing documents come back as snapshots
    with `exists == False`. The first read failure propagates after the pool
    drains.
    """
    ids = _distinct(doc_ids)
    if not ids:
        return {}

    coll = db.collection(collection)
    workers = max(1, min(int(max_workers), len(ids)))
    snapshots: Dict[str, Any] = {}

    with ThreadPoolExecutor(max_workers=workers) as ex:
        futures = {ex.submit(lambda i=doc_id: coll.document(i).get()): doc_id for doc_id in ids}
        for fut in as_completed(futures):
            snapshots[futures[fut]] = fut.result()

    logger.debug("fetch_documents: read %d documents from %s (workers=%d)", len(snapshots), collection, workers)
    return snapshots
