import argparse
import logging

import config
from demo.scenarios import SCENARIOS
from hubscope.hub import Hub
from hubscope.recorder import TrafficRecorder


def load_scenario(key: str, hub: Hub):
    fn = SCENARIOS.get(key, SCENARIOS[config.DEFAULT_SCENARIO])
    return fn(hub)


def print_census(title: str, hub: Hub, scopes) -> None:
    print(title)
    print(f"  {'hub':12s} count={hub.count()}")
    for name, sc in scopes.items():
        if sc.destroyed:
            print(f"  {name:12s} (destroyed)")
            continue
        print(f"  {name:12s} count={sc.count()} count_all={sc.count_all()}")
    print()


def main():
    parser = argparse.ArgumentParser(description="Run a scoped pub/sub scenario.")
    parser.add_argument(
        "--scenario", "-s",
        help="scenario key (" + "/".join(SCENARIOS) + ")",
        default=config.DEFAULT_SCENARIO,
    )
    parser.add_argument(
        "--destroy", "-d",
        action="append",
        help="name of a scope to destroy (repeatable); default: every top-level scope",
        default=None,
    )
    parser.add_argument(
        "--log",
        help="traffic log CSV path",
        default=config.TRAFFIC_LOG_PATH,
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format=config.LOG_FORMAT,
    )

    hub = Hub()
    with TrafficRecorder(hub, args.log) as recorder:
        scopes = load_scenario(args.scenario, hub)
        print_census("=== Before teardown ===", hub, scopes)

        names = args.destroy or [n for n, sc in scopes.items() if sc.parent is hub]
        for name in names:
            sc = scopes.get(name)
            if sc is None:
                print(f"Unknown scope: {name} (known: {', '.join(scopes)})")
                continue
            sc.destroy()

        print_census("=== After teardown ===", hub, scopes)

    print(f"{recorder.rows_written} events written to: {args.log}")


if __name__ == "__main__":
    main()
