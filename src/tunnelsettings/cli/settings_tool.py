from __future__ import annotations

import argparse
import json
import sys

from pydantic import ValidationError

from tunnelsettings.config import get_config
from tunnelsettings.enums import BridgeState, TunnelType
from tunnelsettings.observability import configure_logging, set_metrics_enabled
from tunnelsettings.relay_constraints import (
    ANY,
    LocationConstraint,
    NormalRelaySettingsUpdate,
    RelayConstraintsUpdate,
)
from tunnelsettings.services.persister import SettingsLoadError, SettingsPersister


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tunnelsettings", description="Inspect and change daemon settings")
    parser.add_argument("--path", help="settings document (defaults to the configured settings path)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("show", help="print the current settings document")
    sub.add_parser("reset", help="replace the settings with defaults")

    bridge = sub.add_parser("bridge-state", help="set when the bridge hop is used")
    bridge.add_argument("state", choices=[s.value for s in BridgeState])

    location = sub.add_parser("location", help="constrain relay location ('any' clears it)")
    location.add_argument("country")
    location.add_argument("city", nargs="?")
    location.add_argument("hostname", nargs="?")

    protocol = sub.add_parser("tunnel-protocol", help="constrain the tunnel protocol")
    protocol.add_argument("protocol", choices=[ANY, *[t.value for t in TunnelType]])

    lan = sub.add_parser("allow-lan", help="allow traffic to private networks")
    lan.add_argument("value", choices=["on", "off"])
    return parser


def _location_update(args: argparse.Namespace) -> NormalRelaySettingsUpdate:
    if args.country == ANY:
        return NormalRelaySettingsUpdate(constraints=RelayConstraintsUpdate(location=ANY))
    location = LocationConstraint(country=args.country, city=args.city, hostname=args.hostname)
    return NormalRelaySettingsUpdate(constraints=RelayConstraintsUpdate(location=location))


def _protocol_update(args: argparse.Namespace) -> NormalRelaySettingsUpdate:
    protocol = ANY if args.protocol == ANY else TunnelType(args.protocol)
    return NormalRelaySettingsUpdate(constraints=RelayConstraintsUpdate(tunnel_protocol=protocol))


def run(args: argparse.Namespace, persister: SettingsPersister) -> int:
    if args.command == "reset":
        # Does not read the old document, so a corrupt file can be recovered.
        persister.reset()
        print("reset")
        return 0

    persister.load()
    if args.command == "show":
        print(json.dumps(persister.settings.encode(), indent=2, sort_keys=True))
        return 0

    if args.command == "bridge-state":
        changed = persister.set_bridge_state(BridgeState(args.state))
    elif args.command == "location":
        changed = persister.update_relay_settings(_location_update(args))
    elif args.command == "tunnel-protocol":
        changed = persister.update_relay_settings(_protocol_update(args))
    elif args.command == "allow-lan":
        changed = persister.set_allow_lan(args.value == "on")
    else:
        raise ValueError(f"Unsupported command: {args.command}")

    print("changed" if changed else "unchanged")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = get_config()
    configure_logging(config.log_level)
    set_metrics_enabled(config.metrics_enabled)

    persister = SettingsPersister(args.path or config.settings_path)
    try:
        return run(args, persister)
    except SettingsLoadError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except ValidationError as exc:
        print(f"error: invalid value: {exc}", file=sys.stderr)
        return 2
    except OSError as exc:
        print(f"error: cannot write settings: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
