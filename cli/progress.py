"""Console progress rendering for the scraping phases."""

from __future__ import annotations

from typing import Dict, Optional

from tqdm import tqdm

from eswil.models import ProgressCallback


class PhaseBar:
    """A ``(label, done, total)`` callback drawing one tqdm bar.

    The bar is created on the first report, once the total is known.
    """

    def __init__(self, phase: str, disable: bool = False) -> None:
        self.phase = phase
        self.disable = disable
        self._bar: Optional[tqdm] = None

    def __call__(self, label: str, done: int, total: int) -> None:
        if self._bar is None:
            self._bar = tqdm(total=total, desc=self.phase, unit="it", disable=self.disable)
        self._bar.total = total
        self._bar.update(done - self._bar.n)
        self._bar.set_postfix_str(label, refresh=False)

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None


class ProgressBars:
    """Hands out one :class:`PhaseBar` per phase and closes them all at the end."""

    def __init__(self, disable: bool = False) -> None:
        self.disable = disable
        self._bars: Dict[str, PhaseBar] = {}

    def phase(self, name: str) -> ProgressCallback:
        # Each phase finishes before the next starts; close the previous bar
        # so the next one renders below it.
        for bar in self._bars.values():
            bar.close()
        bar = self._bars[name] = PhaseBar(name, disable=self.disable)
        return bar

    def close(self) -> None:
        for bar in self._bars.values():
            bar.close()

    def __enter__(self) -> "ProgressBars":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
