"""Small JSONL logging utilities for separation progress."""

from __future__ import annotations

import json
import logging
from pathlib import Path
import time
from typing import Any, Iterable, Mapping


class JsonlLogger:
    """Append JSON-serializable records to a JSON Lines file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def write(self, record: Mapping[str, Any]) -> None:
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(dict(record), ensure_ascii=False) + "\n")


def log_steps_jsonl(path: str | Path, steps: Iterable[Mapping[str, Any]]) -> None:
    """Write many step dictionaries to JSONL."""
    logger = JsonlLogger(path)
    for step in steps:
        logger.write(step)


class ProgressRecorder:
    """Progress callback that forwards ``(stage, fraction)`` events.

    Events go to the module logger at debug level and, when ``path`` is
    given, to a JSONL file with a monotonic timestamp.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.sink = JsonlLogger(path) if path is not None else None
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self._start = time.perf_counter()

    def __call__(self, stage: str, fraction: float) -> None:
        self.logger.debug("progress %s %.1f%%", stage, 100.0 * fraction)
        if self.sink is not None:
            self.sink.write(
                {
                    "stage": stage,
                    "fraction": round(float(fraction), 6),
                    "elapsed_sec": round(time.perf_counter() - self._start, 6),
                }
            )
