from __future__ import annotations

import argparse
import json
import sys

import requests

from lsf.docker_ops import PollFailure
from lsf.hosts import PRODUCT, rewrite
from lsf.scheduler import Agent
from lsf.settings import ConfigError, load_config, settings


def _print(obj) -> None:
    print(json.dumps(obj, indent=2, ensure_ascii=False))


def _fail(e: Exception) -> int:
    print(f"{PRODUCT} error: {e}", file=sys.stderr)
    return 1


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Local Stack Focus CLI")
    p.add_argument("--config", default=None, help="Stack config TOML (default: $LOCAL_STACK_FOCUS)")
    p.add_argument("--api", default=settings.api_url, help="Status API base URL")
    sub = p.add_subparsers(dest="cmd", required=True)

    s_run = sub.add_parser("run", help="Run the agent in the foreground")
    s_run.add_argument("--tick-s", type=float, default=None, help="Seconds between polls")

    s_prev = sub.add_parser("preview", help="Print a hosts file as the agent would rewrite it")
    s_prev.add_argument("--hosts-file", default="/etc/hosts")
    s_prev.add_argument("--ip", required=True, help="Target IP to write")

    sub.add_parser("status", help="Show agent status")

    s_ev = sub.add_parser("events", help="Show recent events")
    s_ev.add_argument("--limit", type=int, default=20)

    args = p.parse_args(argv)

    base = args.api.rstrip("/")

    if args.cmd == "run":
        try:
            config = load_config(args.config)
            Agent(config, interval_s=args.tick_s).run_forever()
        except (ConfigError, PollFailure) as e:
            return _fail(e)
        return 0

    if args.cmd == "preview":
        try:
            config = load_config(args.config)
            with open(args.hosts_file, encoding="utf-8") as fh:
                content = fh.read()
        except (ConfigError, OSError) as e:
            return _fail(e)
        sys.stdout.write(rewrite(content, config.dependencies, config.network, config.target, args.ip))
        return 0

    if args.cmd == "status":
        r = requests.get(f"{base}/status", timeout=10)
        _print(r.json())
        return 0 if r.ok else 1

    if args.cmd == "events":
        _print(requests.get(f"{base}/events", params={"limit": args.limit}, timeout=10).json())
        return 0

    return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
