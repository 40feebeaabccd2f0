"""
Resolve a batch of dependencies independently of each other.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Sequence

from tqdm import tqdm

from .models import ResolutionOutcome, ResolutionRequest
from .resolvers import SafeVersionResolver


logger = logging.getLogger(__name__)


def resolve_all(
    requests: Sequence[ResolutionRequest],
    resolver: SafeVersionResolver,
    max_workers: int = 1,
    show_progress: bool = False,
) -> List[ResolutionOutcome]:
    """Resolve every request and return outcomes in request order.

    A failing dependency only produces a failed outcome; it never stops the
    resolution of the others.
    """
    if not requests:
        return []

    with tqdm(total=len(requests), unit="pkg", desc="Resolving", disable=not show_progress) as pbar:
        if max_workers <= 1 or len(requests) == 1:
            outcomes = []
            for request in requests:
                outcomes.append(resolver.resolve(request))
                pbar.update(1)
            return outcomes

        workers = min(max_workers, len(requests))
        logger.debug("Resolving %d dependencies with %d workers", len(requests), workers)
        slots: List[ResolutionOutcome] = [None] * len(requests)  # type: ignore[list-item]
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(resolver.resolve, request): index
                for index, request in enumerate(requests)
            }
            for future in as_completed(futures):
                slots[futures[future]] = future.result()
                pbar.update(1)
        return slots
