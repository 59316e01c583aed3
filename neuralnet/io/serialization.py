"""Binary persistence of :class:`ParameterStore` objects.

A network file is an uncompressed ``.npz`` archive holding, in order, the
bias vectors ``b0..bN``, the weight matrices ``W0..WN``, the ``topology``
and a ``format_version`` scalar.
"""

from __future__ import annotations

import io
import os
import stat
import tempfile
import zipfile
from pathlib import Path

import numpy as np

from ..core.errors import InvalidTopologyError, NetworkFormatError
from ..core.params import ParameterStore

FORMAT_VERSION = 1


def serialize(store: ParameterStore) -> bytes:
    """Encode ``store`` into bytes; :func:`deserialize` inverts it exactly."""

    payload: dict[str, np.ndarray] = {}
    for idx, b in enumerate(store.biases):
        payload[f"b{idx}"] = b
    for idx, W in enumerate(store.weights):
        payload[f"W{idx}"] = W
    payload["topology"] = np.asarray(store.topology, dtype=np.int64)
    payload["format_version"] = np.asarray(FORMAT_VERSION, dtype=np.int64)
    buffer = io.BytesIO()
    np.savez(buffer, **payload)
    return buffer.getvalue()


def deserialize(data: bytes) -> ParameterStore:
    """Decode bytes produced by :func:`serialize`."""

    try:
        archive = np.load(io.BytesIO(data), allow_pickle=False)
    except (ValueError, OSError, EOFError, zipfile.BadZipFile) as exc:
        raise NetworkFormatError(f"not a network file: {exc}") from exc
    if not hasattr(archive, "files"):
        raise NetworkFormatError("not a network file: expected an .npz archive")
    try:
        with archive:
            arrays = {name: archive[name] for name in archive.files}
    except (ValueError, OSError, EOFError, zipfile.BadZipFile) as exc:
        raise NetworkFormatError(f"corrupt network file: {exc}") from exc

    version = arrays.get("format_version")
    if version is None or int(version) != FORMAT_VERSION:
        raise NetworkFormatError(f"unsupported network format version: {version}")
    if "topology" not in arrays:
        raise NetworkFormatError("network file has no topology")
    topology = [int(dim) for dim in arrays["topology"].reshape(-1)]
    layers = len(topology) - 1
    try:
        weights = [arrays[f"W{idx}"] for idx in range(layers)]
        biases = [arrays[f"b{idx}"] for idx in range(layers)]
    except KeyError as exc:
        raise NetworkFormatError(f"network file is missing parameter {exc}") from exc
    try:
        return ParameterStore.from_arrays(topology, weights, biases)
    except InvalidTopologyError as exc:
        raise NetworkFormatError(f"inconsistent network file: {exc}") from exc


def _target_mode(path: Path) -> int:
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def save(store: ParameterStore, path: str | Path) -> str:
    """Write ``store`` to ``path``, replacing any existing file atomically."""

    path = Path(path)
    data = serialize(store)
    directory = path.parent if str(path.parent) else Path(".")
    fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        # mkstemp creates owner-only files; match what open() would have made
        os.chmod(tmp_name, _target_mode(path))
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return str(path)


def load(path: str | Path) -> ParameterStore:
    """Read a network written by :func:`save`."""

    return deserialize(Path(path).read_bytes())


__all__ = ["FORMAT_VERSION", "deserialize", "load", "save", "serialize"]
