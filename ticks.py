import argparse
import logging
import sys

import ticker
import util


def main(argv=None):

    parser = argparse.ArgumentParser(prog="chartticks", description="print axis ticks for a range")
    parser.add_argument("vmin", type=float)
    parser.add_argument("vmax", type=float)
    parser.add_argument("--max-ticks", "-n", type=int, default=10)
    parser.add_argument("--steps", "-s", type=float, nargs="+", default=list(ticker.DEFAULT_STEPS))
    parser.add_argument("--labels", "-l", action="store_true", help="print formatted labels instead of raw values")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        locator = ticker.TickLocator(max_ticks=args.max_ticks, steps=args.steps)
        with util.Timer("ticks"):
            result = locator.tick_result(args.vmin, args.vmax)
    except ticker.TickerError as oops:
        print(f"chartticks: {oops}", file=sys.stderr)
        return 2

    for value, label in zip(result.tickvals, result.ticktext):
        print(label if args.labels else repr(value))
    return 0


if __name__ == "__main__":
    sys.exit(main())
