from __future__ import annotations

import argparse
import json
import logging

from bascula_client_sdk import ConfigError

from bascula_console.app.bootstrap import ConsoleBootstrap
from bascula_console.app.state import Route
from bascula_console.config import ConsoleConfigError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)


def run(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Weighing station console")
    parser.add_argument("--screen", choices=[route.value for route in Route], default=None)
    args = parser.parse_args(argv)

    try:
        bootstrap = ConsoleBootstrap()
    except (ConfigError, ConsoleConfigError) as exc:
        print(f"Configuration error: {exc}")
        return 2

    result = bootstrap.open_screen(args.screen) if args.screen else bootstrap.start()
    print(" | ".join(bootstrap.visible_navigation()))
    if result.error_message:
        print(f"{bootstrap.state.status_message}: {result.error_message}")
        return 1
    print(json.dumps(bootstrap.view(result.route).render(), indent=2, default=str))
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
