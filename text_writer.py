#!/usr/bin/env python3
"""
Generate random text from a Markov model of the text read on stdin.

Usage: text-writer <order> <length> < input_file.txt
"""

import sys
import logging
import argparse
from dataclasses import dataclass
from typing import List, Optional, TextIO

from markov_text import MarkovModel, MarkovModelError

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


@dataclass
class WriterConfig:
    order: int
    length: int
    seed: Optional[int] = None
    dump: bool = False
    progress: bool = False
    log_level: str = "WARNING"

    def __post_init__(self):
        if self.order < 0:
            raise ValueError("order must be non-negative")
        if self.length < self.order:
            raise ValueError("length must be at least order")
        self.log_level = self.log_level.upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log level: {self.log_level}")


def read_corpus(stream: TextIO) -> str:
    """Concatenate all lines of stream with line terminators removed."""
    return ''.join(line.rstrip('\r\n') for line in stream)


def parse_args(argv: Optional[List[str]] = None) -> WriterConfig:
    parser = argparse.ArgumentParser(
        description='Generate text from a k-th order Markov model of stdin')
    parser.add_argument('order', type=int, help='Order k of the Markov model')
    parser.add_argument('length', type=int, help='Number of characters to generate')
    parser.add_argument('--seed', type=int, help='Random seed for reproducibility')
    parser.add_argument('--dump', action='store_true',
                        help='Print the model frequency table to stderr')
    parser.add_argument('--progress', action='store_true',
                        help='Show a progress bar while building the model')
    parser.add_argument('--log-level', default='WARNING', help='Logging level')

    args = parser.parse_args(argv)
    try:
        return WriterConfig(
            order=args.order,
            length=args.length,
            seed=args.seed,
            dump=args.dump,
            progress=args.progress,
            log_level=args.log_level,
        )
    except ValueError as e:
        parser.error(str(e))


def main(argv: Optional[List[str]] = None) -> int:
    config = parse_args(argv)
    logging.basicConfig(level=config.log_level, format=LOG_FORMAT)

    text = read_corpus(sys.stdin)
    logging.info(f"Read {len(text)} characters from stdin")

    try:
        model = MarkovModel(text, config.order, rng=config.seed, progress=config.progress)
        if config.dump:
            print(model, file=sys.stderr)
        result = model.generate(text[:config.order], config.length)
    except MarkovModelError as e:
        logging.error(f"Text generation failed: {e}")
        return 1

    print(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
