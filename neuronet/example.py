"""
Neural Network Example

This module demonstrates how to use the neuronet components to build,
train, save and evaluate a small network on a logic gate.

    python -m neuronet.example --gate xor --hidden 3 --save models/xor.txt
"""

import argparse
import logging
from typing import List, Optional, Tuple

from .activations import ActivationType
from .networks import Network, NeuroStructure
from .trainer import TrainParameters, TrainingResult
from .utils import plot_history

_GATES = {
    'and': lambda a, b: float(a and b),
    'or': lambda a, b: float(a or b),
    'xor': lambda a, b: float(a != b),
}


def logic_gate_dataset(gate: str = 'and') -> Tuple[List[List[float]], List[List[float]]]:
    """Truth table of a two-input logic gate.

    Args:
        gate: One of 'and', 'or', 'xor'.

    Returns:
        Tuple of (inputs, targets).
    """
    try:
        fn = _GATES[gate.lower()]
    except KeyError:
        raise ValueError(f"Unknown gate: {gate}. Must be one of {sorted(_GATES)}") from None

    inputs = [[float(a), float(b)] for a in (0, 1) for b in (0, 1)]
    targets = [[fn(a, b)] for a, b in ((0, 0), (0, 1), (1, 0), (1, 1))]
    return inputs, targets


def run_logic_gate_demo(gate: str = 'and',
                        hidden: int = 2,
                        params: Optional[TrainParameters] = None,
                        momentum: bool = False,
                        seed: int = 42) -> Tuple[Network, TrainingResult]:
    """Train a 2-hidden-1 sigmoid network on a logic gate.

    Args:
        gate: Gate to learn.
        hidden: Size of the single hidden layer.
        params: Training parameters, defaults to TrainParameters().
        momentum: Train with the momentum rule.
        seed: Seed for weight initialization.

    Returns:
        Tuple of (trained network, training result).
    """
    inputs, targets = logic_gate_dataset(gate)

    structure = NeuroStructure(
        inputs=2,
        hiddens=(hidden,),
        outputs=1,
        hidden_activation=ActivationType.SIGMOID,
        output_activation=ActivationType.SIGMOID,
        name=gate.lower(),
    )
    network = Network(structure, rng=seed)
    params = params or TrainParameters()

    if momentum:
        result = network.train_moment(inputs, targets, params)
    else:
        result = network.train(inputs, targets, params)

    return network, result


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Train a small network on a logic gate.")
    parser.add_argument('--gate', default='and', choices=sorted(_GATES))
    parser.add_argument('--hidden', type=int, default=2)
    parser.add_argument('--learning-rate', type=float, default=0.5)
    parser.add_argument('--accuracy', type=float, default=0.01)
    parser.add_argument('--max-epochs', type=int, default=10000)
    parser.add_argument('--momentum', action='store_true')
    parser.add_argument('--seed', type=int, default=42)
    parser.add_argument('--save', default=None, help="Path to save the trained network")
    parser.add_argument('--plot', default=None, help="Path to save the error curve")
    args = parser.parse_args(argv)

    params = TrainParameters(
        learning_rate=args.learning_rate,
        accuracy=args.accuracy,
        max_epochs=args.max_epochs,
    )

    print(f"Training {args.gate.upper()} gate...")
    network, result = run_logic_gate_demo(
        gate=args.gate,
        hidden=args.hidden,
        params=params,
        momentum=args.momentum,
        seed=args.seed,
    )
    print(f"{result.status.name} after {result.epochs} epochs, error: {result.error:.6f}")

    inputs, targets = logic_gate_dataset(args.gate)
    for x, y in zip(inputs, targets):
        print(f"  {x} -> {network.predict(x)[0]:.4f} (expected {y[0]})")

    if args.save:
        network.save(args.save)
    if args.plot:
        plot_history(result.history, args.plot, title=f"{args.gate.upper()} training error")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
