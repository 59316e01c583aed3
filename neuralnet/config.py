"""Training configuration loaded from JSON/YAML files and CLI overrides."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

from .training.trainer import BatchPolicy


@dataclass(frozen=True)
class TrainConfig:
    """Hyper-parameters and output locations for one ``train`` invocation."""

    epochs: int = 1
    batch_size: int = 1
    learning_rate: float = 1.0
    batch_policy: str = BatchPolicy.INCLUDE_LAST.value
    metrics_path: str | None = None
    plot_dir: str | None = None

    def __post_init__(self) -> None:
        for key in ("epochs", "batch_size"):
            value = getattr(self, key)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{key} must be an integer, got {value!r}")
        if isinstance(self.learning_rate, bool) or not isinstance(
            self.learning_rate, (int, float)
        ):
            raise ValueError(
                f"learning_rate must be a number, got {self.learning_rate!r}"
            )
        BatchPolicy(self.batch_policy)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "TrainConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(
                f"Unknown config keys: {', '.join(unknown)}. "
                f"Available keys: {', '.join(sorted(known))}"
            )
        return cls(**dict(values))

    def merged(self, **overrides: Any) -> "TrainConfig":
        """Return a copy with every non-``None`` override applied."""

        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _load_override(path: Path) -> dict:
    text = path.read_text()
    if path.suffix in {".yml", ".yaml"}:
        try:
            import yaml  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load YAML configs") from exc
        return yaml.safe_load(text) or {}
    return json.loads(text)


def load_config(path: str | Path) -> TrainConfig:
    """Read a :class:`TrainConfig` from a JSON or YAML file."""

    data = _load_override(Path(path))
    if not isinstance(data, Mapping):
        raise ValueError(f"Config {path} must contain a mapping, got {type(data).__name__}")
    return TrainConfig.from_mapping(data)


__all__ = ["TrainConfig", "load_config"]
