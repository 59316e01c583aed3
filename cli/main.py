"""Create, train and query sigmoid feedforward networks stored on disk."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Iterable

from neuralnet.config import TrainConfig, load_config
from neuralnet.core.errors import NeuralNetError
from neuralnet.core.forward import feed_forward
from neuralnet.core.params import ParameterStore
from neuralnet.data.dataset import parse_vector, read_training_set
from neuralnet.io import serialization
from neuralnet.reporting.metrics import JsonlSink
from neuralnet.reporting.plots import PlotAdapter
from neuralnet.training.trainer import BatchPolicy, Trainer

USAGE = """\
nncli <network> <command> <arguments>

commands:
    make:  generate a network and save it to <network>
        argument: topology, e.g. "1-2-3-4"
        eg. nncli net.nn make 1-2-3-4

    train: load <network>, train it and save it back
        arguments:
            1) path to training set
            2) epochs (integer)
            3) batch size (integer)
            4) learning rate (decimal)
        eg. nncli net.nn train path/to/dataset 1000 100 2.5
        dataset format: |-----input------|-output-|
                        0.53, 0.012, 0.99, 0, 1

    feed:  load <network> and propagate an input vector
        argument: input vector, e.g. "0.53-0.61-1.0"
        eg. nncli net.nn feed 0.53-0.61-1.0

    help:  show this message
"""

OUTPUT_DELIMITER = " | "


class UsageError(Exception):
    """Command line arguments are missing or malformed."""


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(prog="nncli", description=__doc__, usage=USAGE, add_help=False)
    parser.add_argument("network", type=Path, help="Path of the network file")
    commands = parser.add_subparsers(dest="command", required=True)

    make = commands.add_parser("make", add_help=False)
    make.add_argument("topology", help="Layer sizes, e.g. 2-3-1")
    make.add_argument("--seed", type=int, help="Seed for the random initialisation")

    train = commands.add_parser("train", add_help=False)
    train.add_argument("dataset", type=Path, help="Training-set file")
    train.add_argument("epochs", type=int, nargs="?")
    train.add_argument("batch_size", type=int, nargs="?")
    train.add_argument("learning_rate", type=float, nargs="?")
    train.add_argument("--config", type=Path, help="JSON/YAML training config")
    train.add_argument(
        "--batch-policy",
        choices=[policy.value for policy in BatchPolicy],
        help="How an undersized trailing batch is clipped",
    )
    train.add_argument("--metrics", help="Write per-epoch metrics to this JSONL file")
    train.add_argument("--plot-dir", help="Write a loss curve to this directory")

    feed = commands.add_parser("feed", add_help=False)
    feed.add_argument("input_vector", help="Input values, e.g. 0.5-0.25")
    return parser


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(list(argv) if argv is not None else None)


def _make(args: argparse.Namespace) -> dict:
    topology = parse_vector(args.topology, dtype=int)
    store = ParameterStore.initialize(topology.tolist(), seed=args.seed)
    serialization.save(store, args.network)
    return {
        "created": str(args.network),
        "topology": list(store.topology),
        "parameters": store.parameter_count(),
    }


def _resolve_train_config(args: argparse.Namespace) -> TrainConfig:
    config = load_config(args.config) if args.config else None
    positional = (args.epochs, args.batch_size, args.learning_rate)
    if config is None:
        if any(value is None for value in positional):
            raise UsageError("train needs <dataset> <epochs> <batch> <learning_rate>")
        config = TrainConfig()
    return config.merged(
        epochs=args.epochs,
        batch_size=args.batch_size,
        learning_rate=args.learning_rate,
        batch_policy=args.batch_policy,
        metrics_path=args.metrics,
        plot_dir=args.plot_dir,
    )


def _train(args: argparse.Namespace) -> dict:
    config = _resolve_train_config(args)
    store = serialization.load(args.network)
    dataset = read_training_set(args.dataset, store.topology[0], store.topology[-1])

    callbacks: list[object] = []
    if config.metrics_path:
        callbacks.append(JsonlSink(config.metrics_path, network=str(args.network)))
    plots = None
    if config.plot_dir:
        plots = PlotAdapter(config.plot_dir, enable_plots=True)
        callbacks.append(plots)

    trainer = Trainer(store, policy=config.batch_policy, callbacks=callbacks)
    mse_before = trainer.mean_squared_error(dataset)
    steps = trainer.train(dataset, config.epochs, config.batch_size, config.learning_rate)
    mse_after = trainer.mean_squared_error(dataset)
    serialization.save(store, args.network)

    summary = {
        "network": str(args.network),
        "dataset": str(args.dataset),
        "instances": len(dataset),
        "steps": steps,
        "mse_before": mse_before,
        "mse_after": mse_after,
        "config": config.to_dict(),
    }
    if plots is not None:
        plot_path = plots.close()
        if plot_path is not None:
            summary["plot"] = str(plot_path)
    return summary


def _feed(args: argparse.Namespace) -> str:
    store = serialization.load(args.network)
    output = feed_forward(store, parse_vector(args.input_vector))
    return OUTPUT_DELIMITER.join(f"{value:g}" for value in output)


def main(argv: Iterable[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv in (["help"], ["--help"], ["-h"]):
        print(USAGE)
        return 0

    try:
        args = parse_args(argv)
        if args.command == "make":
            print(json.dumps(_make(args), sort_keys=True))
        elif args.command == "train":
            print(json.dumps(_train(args), sort_keys=True))
        else:
            print(_feed(args))
    except UsageError as exc:
        print(f"error: {exc}\nSee 'nncli help'.", file=sys.stderr)
        return 1
    except (NeuralNetError, OSError, RuntimeError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
