#!/usr/bin/env python3
"""
Command-line interface for multi-hypotheses tracking.

    mht-track track --model model.json --weights weights.json --output result.json
    mht-track train --model model.json --ground-truth gt.json --output weights.json
    mht-track validate --model model.json --ground-truth gt.json
    mht-track dot --model model.json --output graph.dot [--result result.json]
    mht-track weights --model model.json
"""

import argparse
import sys
from typing import List, Optional

import matplotlib.pyplot as plt

from config import load_config
from data import load_graph, load_link_results, load_weights, save_link_results, save_weights
from utils import setup_logging
from visualization import plot_learning_history, save_dot
from .tracking_model import TrackingModel


def _load_model(args) -> TrackingModel:
    config = load_config(args.config)
    setup_logging(args.log_level or config.logging.level, config.logging.format)
    return TrackingModel(load_graph(args.model), config=config)


def run_track(args) -> int:
    model = _load_model(args)
    weights = load_weights(args.weights)
    result = model.infer(weights)
    results = model.link_results(result.solution)
    save_link_results(args.output, results)

    if args.dot:
        save_dot(args.dot, model.graph, model.model, result.solution)

    verification = model.verify(result.solution)
    print(f"Solution energy: {result.energy:.6g}")
    print(f"Active links: {sum(1 for r in results if r.value)} / {len(results)}")
    print(verification.summarize())
    print(f"Saved result to {args.output}")
    return 0 if verification.valid else 1


def run_train(args) -> int:
    model = _load_model(args)
    annotations = load_link_results(args.ground_truth)
    weights = model.learn(annotations)
    save_weights(args.output, weights, model.weight_descriptions())

    if args.plot:
        fig = plot_learning_history(model.learner.history, save_path=args.plot)
        plt.close(fig)

    history = model.learner.history
    print(f"Learned {len(weights)} weights in {len(history['objective'])} iterations")
    if history['objective']:
        print(f"Best objective: {min(history['objective']):.6g}")
    print(f"Saved weights to {args.output}")
    return 0


def run_validate(args) -> int:
    model = _load_model(args)
    solution = model.ground_truth(load_link_results(args.ground_truth))
    verification = model.verify(solution)
    print(verification.summarize())
    return 0 if verification.valid else 1


def run_dot(args) -> int:
    model = _load_model(args)
    solution = None
    if args.result:
        # a saved result is a complete set of link annotations
        solution = model.ground_truth(load_link_results(args.result))
    save_dot(args.output, model.graph, model.model if solution is not None else None, solution)
    print(f"Saved graph to {args.output}")
    return 0


def run_weights(args) -> int:
    model = _load_model(args)
    for idx, description in enumerate(model.weight_descriptions()):
        print(f"{idx:4d}  {description}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Multi-hypotheses tracking with structured learning')
    parser.add_argument('--config', type=str, default=None, help='YAML config file')
    parser.add_argument('--log-level', type=str, default=None, help='Override logging level')
    subparsers = parser.add_subparsers(dest='command', required=True)

    p = subparsers.add_parser('track', help='Run inference with given weights')
    p.add_argument('--model', type=str, required=True, help='Model JSON file')
    p.add_argument('--weights', type=str, required=True, help='Weights JSON file')
    p.add_argument('--output', type=str, required=True, help='Result JSON file')
    p.add_argument('--dot', type=str, default=None, help='Also save the labeled graph as DOT')
    p.set_defaults(func=run_track)

    p = subparsers.add_parser('train', help='Learn weights from a ground truth')
    p.add_argument('--model', type=str, required=True, help='Model JSON file')
    p.add_argument('--ground-truth', type=str, required=True, help='Ground truth JSON file')
    p.add_argument('--output', type=str, required=True, help='Weights JSON file')
    p.add_argument('--plot', type=str, default=None, help='Save learning curves to this image')
    p.set_defaults(func=run_train)

    p = subparsers.add_parser('validate', help='Check that a ground truth is consistent')
    p.add_argument('--model', type=str, required=True, help='Model JSON file')
    p.add_argument('--ground-truth', type=str, required=True, help='Ground truth JSON file')
    p.set_defaults(func=run_validate)

    p = subparsers.add_parser('dot', help='Export the hypotheses graph as DOT')
    p.add_argument('--model', type=str, required=True, help='Model JSON file')
    p.add_argument('--output', type=str, required=True, help='DOT file')
    p.add_argument('--result', type=str, default=None, help=(
        'Result JSON file to highlight. The labeling is rebuilt from the link '
        'records, so a detection that appears and disappears without any '
        'active link is drawn as inactive'
    ))
    p.set_defaults(func=run_dot)

    p = subparsers.add_parser('weights', help='List weight descriptions')
    p.add_argument('--model', type=str, required=True, help='Model JSON file')
    p.set_defaults(func=run_weights)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
