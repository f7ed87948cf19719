"""
Semagram demo: render a phrase to an SVG file without the server.

Usage:
  python samples/demo_logogram.py "the cat sat"                       # prints SVG
  python samples/demo_logogram.py "the cat sat" -o cat.svg            # saves SVG
  python samples/demo_logogram.py $'first clause\nsecond' -m composite -o comp.svg
  python samples/demo_logogram.py "she was there" -m blend -b "time curved back" -w 0.3
  python samples/demo_logogram.py "the cat sat" --store ./data/graphemes
"""

import argparse
import json
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "backend"))

from semagram.engine.composer import Composer
from semagram.models.parameters import ParameterVector
from semagram.models.requests import LogogramRequest
from semagram.service import generate_logogram
from semagram.store.backends import InMemoryBackend, JsonFileBackend
from semagram.store.graphemes import GraphemeStore


def main():
    parser = argparse.ArgumentParser(description="Semagram: phrase to logogram SVG")
    parser.add_argument("phrase", help="Phrase text (one clause per line for composite)")
    parser.add_argument("-o", "--output", help="Output SVG file")
    parser.add_argument("-m", "--mode", choices=["single", "composite", "blend"], default="single")
    parser.add_argument("-b", "--secondary", help="Phrase B for blend mode")
    parser.add_argument("-w", "--weight", type=float, default=0.5, help="Blend weight 0..1")
    parser.add_argument("-p", "--params", help="JSON object of parameter overrides")
    parser.add_argument("-s", "--seed", help="Pin the composition seed")
    parser.add_argument("--store", help="Grapheme directory (default: in-memory)")
    args = parser.parse_args()

    params = ParameterVector(**json.loads(args.params)) if args.params else ParameterVector()
    backend = JsonFileBackend(args.store) if args.store else InMemoryBackend()
    store = GraphemeStore(backend=backend)

    request = LogogramRequest(
        phrase=args.phrase,
        parameters=params,
        mode=args.mode,
        secondary_phrase=args.secondary,
        blend=args.weight,
        composition_seed=args.seed,
        archive=False,
    )
    result = generate_logogram(request, store, Composer(store))
    lg = result.logogram

    print(f"Tokens: {lg.tokens}", file=sys.stderr)
    for key, g in lg.graphemes.items():
        print(f"  {key}: seed={g.seed:08x} rings={g.geometry.ring_count} spokes={g.geometry.spokes}", file=sys.stderr)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(lg.svg_document)
        print(f"Saved → {args.output}", file=sys.stderr)
    else:
        print(lg.svg_document)


if __name__ == "__main__":
    main()
