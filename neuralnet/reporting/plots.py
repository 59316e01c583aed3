"""Training-curve figures built from per-epoch metric records."""

from __future__ import annotations

import importlib.util
import json
from pathlib import Path
from typing import Dict, List, Mapping


class PlotAdapter:
    """Record epoch metrics and draw the error curve with batch counts."""

    def __init__(self, run_dir: str | Path, enable_plots: bool = False):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self.records: List[Dict[str, float]] = []
        if self.enable_plots:
            if importlib.util.find_spec("matplotlib") is None:
                raise RuntimeError("matplotlib is required to write training plots")
            self.run_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_jsonl(cls, metrics_path: str | Path, run_dir: str | Path) -> "PlotAdapter":
        """Rebuild the history from a file written by :class:`JsonlSink`."""

        adapter = cls(run_dir, enable_plots=True)
        for line in Path(metrics_path).read_text().splitlines():
            if line.strip():
                record = json.loads(line)
                adapter.on_epoch(int(record.pop("epoch")), record)
        return adapter

    def on_epoch(self, epoch: int, metrics: Mapping[str, object]) -> None:
        if not self.enable_plots:
            return
        record: Dict[str, float] = {"epoch": float(epoch)}
        for key, value in metrics.items():
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                record[key] = float(value)
        self.records.append(record)

    def close(self) -> Path | None:
        if not self.enable_plots or not self.records:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt

        epochs = [r["epoch"] for r in self.records]
        fig, err_ax = plt.subplots()
        errors = [r.get("mse", float("nan")) for r in self.records]
        err_ax.plot(epochs, errors, color="tab:blue")
        err_ax.set_xlabel("epoch")
        err_ax.set_ylabel("mse", color="tab:blue")
        if any("batches" in r for r in self.records):
            batch_ax = err_ax.twinx()
            batch_ax.step(
                epochs,
                [r.get("batches", 0.0) for r in self.records],
                where="mid",
                color="tab:gray",
            )
            batch_ax.set_ylabel("batches per epoch", color="tab:gray")
        final = self.records[-1].get("mse", float("nan"))
        fig.suptitle(f"{len(epochs)} epochs, final mse {final:.4g}")
        plot_path = self.run_dir / "loss.png"
        fig.savefig(plot_path)
        plt.close(fig)
        return plot_path

    __call__ = on_epoch
