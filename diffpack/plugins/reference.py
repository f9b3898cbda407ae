"""Reference diff lifecycle plugin."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path

from diffpack.plugins.base import DiffEndEvent, DiffFieldEvent, DiffStartEvent, LifecyclePlugin


@dataclass(slots=True)
class DiffTracePlugin(LifecyclePlugin):
    """Appends one NDJSON record per diff hook to ``output_path``."""

    output_path: str = "runs/plugins/diff-trace.ndjson"
    name: str = "diff-trace"

    def on_diff_start(self, event: DiffStartEvent) -> None:
        self._append("on_diff_start", event)

    def on_diff_field(self, event: DiffFieldEvent) -> None:
        self._append("on_diff_field", event)

    def on_diff_end(self, event: DiffEndEvent) -> None:
        self._append("on_diff_end", event)

    def _append(self, hook: str, event: object) -> None:
        path = Path(self.output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        record = {
            "hook": hook,
            "plugin": self.name,
            "event": asdict(event),
        }
        with path.open("a", encoding="utf-8") as handle:
            handle.write(
                json.dumps(record, ensure_ascii=True, sort_keys=True, separators=(",", ":"))
                + "\n"
            )
