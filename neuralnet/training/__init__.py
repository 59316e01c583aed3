"""Mini-batch training loops."""

from .trainer import BatchPolicy, Trainer, clip_batch, mean_squared_error, run_batch, train

__all__ = ["BatchPolicy", "Trainer", "clip_batch", "mean_squared_error", "run_batch", "train"]
