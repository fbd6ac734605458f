#!/usr/bin/env python3
"""
borderctl - Border Router Gateway CLI

Command-line interface for interacting with the borderd daemon.

Usage:
    borderctl status        - Show network status
    borderctl scan          - Scan for networks
    borderctl neighbors     - List neighbors
    borderctl get FIELD     - Read a configuration field
    borderctl set FIELD VAL - Write a configuration field
    borderctl call METHOD   - Invoke any gateway command
    borderctl joiner ...    - Manage joiners
    borderctl commissioner start
    borderctl networkdata   - Show cached network diagnostics
    borderctl pskc ...      - Compute a PSKc offline
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from borderd.crypto.pskc import compute_pskc
from borderd.errors import ErrorCode
from borderd.gateway.fields import FIELDS
from borderd.rpc.dispatch import ParamType
from borderd.rpc.server import DEFAULT_SOCKET_PATH, RPCClient, RPCError


FIELDS_BY_NAME = {f.name: f for f in FIELDS}

STATUS_FIELDS = ("state", "networkname", "channel", "panid", "extpanid", "rloc16", "mode")


def error_name(code: int) -> str:
    try:
        return ErrorCode(code).name
    except ValueError:
        return str(code)


def parse_assignment(text: str) -> Tuple[str, Any]:
    """
    Parse a call parameter.

    key=value passes value as a string; key:=value parses value as
    JSON (for integers: channel:=15).
    """
    key, sep, value = text.partition("=")
    if not sep or not key.rstrip(":"):
        raise argparse.ArgumentTypeError(f"expected key=value, got {text!r}")
    if not key.endswith(":"):
        return key, value
    try:
        return key[:-1], json.loads(value)
    except json.JSONDecodeError:
        raise argparse.ArgumentTypeError(f"invalid JSON value for {key[:-1]}: {value!r}")


class BorderCtl:
    """borderctl CLI application."""

    def __init__(self, socket_path: Path):
        """Initialize CLI with socket path."""
        self.client = RPCClient(socket_path)

    def _call(self, method: str, params: Optional[dict] = None) -> Optional[Dict[str, Any]]:
        """
        Call a gateway command.

        Returns:
            The reply, or None after printing the failure
        """
        try:
            result = self.client.call(method, params)
        except RPCError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return None
        except OSError as e:
            print(f"Failed to connect to borderd: {e}", file=sys.stderr)
            return None

        code = result.get("Error", 0)
        if code != ErrorCode.NONE:
            print(f"Error: {method} failed with {error_name(code)} ({code})", file=sys.stderr)
            return None
        return result

    def status(self) -> int:
        """Show network status."""
        values = {}
        for name in STATUS_FIELDS:
            result = self._call(name)
            if result is None:
                return 1
            values[name] = result[FIELDS_BY_NAME[name].key]

        print("Border Router Status")
        print("=" * 40)
        print(f"State:        {values['state']}")
        print(f"Network:      {values['networkname']}")
        print(f"Channel:      {values['channel']}")
        print(f"PAN ID:       {values['panid']}")
        print(f"Ext PAN ID:   {values['extpanid']}")
        print(f"RLOC16:       {values['rloc16']}")
        print(f"Mode:         {values['mode']}")
        return 0

    def scan(self) -> int:
        """Scan for networks."""
        result = self._call("scan")
        if result is None:
            return 1

        networks = result.get("scan_list", [])
        if not networks:
            print("No networks found")
            return 0

        print(f"Networks ({len(networks)})")
        print("=" * 78)
        print(f"{'J':<2} {'Network Name':<17} {'Ext PAN ID':<17} {'PAN':<7} {'Ch':>3} {'RSSI':>5} {'LQI':>4}")
        print("-" * 78)
        for net in networks:
            joinable = "*" if net.get("IsJoinable") else " "
            print(
                f"{joinable:<2} {net.get('NetworkName', ''):<17} "
                f"{net.get('ExtendedPanId', ''):<17} {net.get('PanId', ''):<7} "
                f"{net.get('Channel', 0):>3} {net.get('Rssi', 0):>5} {net.get('Lqi', 0):>4}"
            )
        return 0

    def neighbors(self) -> int:
        """List neighbors."""
        result = self._call("neighbor")
        if result is None:
            return 1

        neighbors = result.get("neighbor_list", [])
        if not neighbors:
            print("No neighbors")
            return 0

        print(f"Neighbors ({len(neighbors)})")
        print("=" * 70)
        print(f"{'Role':<5} {'RLOC16':<7} {'Age':>4} {'Avg RSSI':>9} {'Last RSSI':>10} {'Mode':<5} {'Ext Address':<17} {'LQI':>4}")
        print("-" * 70)
        for n in neighbors:
            print(
                f"{n.get('Role', ''):<5} {n.get('Rloc16', ''):<7} {n.get('Age', ''):>4} "
                f"{n.get('AvgRssi', ''):>9} {n.get('LastRssi', ''):>10} {n.get('Mode', ''):<5} "
                f"{n.get('ExtAddress', ''):<17} {n.get('LinkQualityIn', 0):>4}"
            )
        return 0

    def get(self, name: str) -> int:
        """Read a configuration field."""
        field = FIELDS_BY_NAME.get(name)
        if field is None:
            print(f"Unknown field: {name}", file=sys.stderr)
            return 1

        result = self._call(field.name)
        if result is None:
            return 1
        print(result[field.key])
        return 0

    def set(self, name: str, value: str) -> int:
        """Write a configuration field."""
        field = FIELDS_BY_NAME.get(name)
        if field is None or not field.setter:
            print(f"Field is not writable: {name}", file=sys.stderr)
            return 1

        param: Any = value
        if field.param.type == ParamType.INT32:
            try:
                param = int(value, 0)
            except ValueError:
                print(f"{name} expects an integer", file=sys.stderr)
                return 1

        if self._call(field.setter, {field.param.name: param}) is None:
            return 1
        print(f"{name} set")
        return 0

    def call(self, method: str, assignments: List[tuple]) -> int:
        """Invoke any command and dump the reply."""
        try:
            result = self.client.call(method, dict(assignments))
        except RPCError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1
        except OSError as e:
            print(f"Failed to connect to borderd: {e}", file=sys.stderr)
            return 1

        print(json.dumps(result, indent=2))
        return 0 if result.get("Error", 0) == 0 else 1

    def joiner_add(self, eui64: str, pskd: str) -> int:
        if self._call("joineradd", {"eui64": eui64, "pskd": pskd}) is None:
            return 1
        print(f"Joiner {eui64} added")
        return 0

    def joiner_remove(self, eui64: str) -> int:
        if self._call("joinerremove", {"eui64": eui64}) is None:
            return 1
        print(f"Joiner {eui64} removed")
        return 0

    def joiner_list(self) -> int:
        result = self._call("joinernum")
        if result is None:
            return 1

        joiners = result.get("joinerList", [])
        if not joiners:
            print("No joiners")
            return 0

        print(f"Joiners ({result.get('joinernum', len(joiners))})")
        print("=" * 50)
        for j in joiners:
            eui64 = "*" if j.get("isAny") else j.get("eui64", "")
            print(f"{eui64:<17} {j.get('pskc', '')}")
        return 0

    def commissioner_start(self) -> int:
        if self._call("commissionerstart") is None:
            return 1
        print("Commissioner starting")
        return 0

    def networkdata(self) -> int:
        result = self._call("networkdata")
        if result is None:
            return 1

        result.pop("Error", None)
        if not result:
            print("No diagnostic data yet (query sent, try again later)")
            return 0
        print(json.dumps(result, indent=2))
        return 0


def pskc(passphrase: str, network_name: str, ext_pan_id: str) -> int:
    """Compute a PSKc without contacting the daemon."""
    try:
        value = compute_pskc(passphrase, network_name, bytes.fromhex(ext_pan_id))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(value.hex())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="borderctl",
        description="Border Router Gateway CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  borderctl status
  borderctl set channel 15
  borderctl set panid 0x1234
  borderctl joiner add '*' J01NME
  borderctl call macfilteradd addr=0011223344556677
  borderctl call setchannel channel:=15
  borderctl pskc 12SECRETPASSWORD34 'Test Network' 0001020304050607
""",
    )

    parser.add_argument(
        "-s", "--socket",
        type=Path,
        default=DEFAULT_SOCKET_PATH,
        help="Path to borderd socket",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command")

    subparsers.add_parser("status", help="Show network status")
    subparsers.add_parser("scan", help="Scan for networks")
    subparsers.add_parser("neighbors", help="List neighbors")
    subparsers.add_parser("networkdata", help="Show network diagnostics")

    get_parser = subparsers.add_parser("get", help="Read a configuration field")
    get_parser.add_argument("field", choices=sorted(FIELDS_BY_NAME))

    set_parser = subparsers.add_parser("set", help="Write a configuration field")
    set_parser.add_argument(
        "field", choices=sorted(f.name for f in FIELDS if f.setter),
    )
    set_parser.add_argument("value")

    call_parser = subparsers.add_parser("call", help="Invoke a gateway command")
    call_parser.add_argument("method")
    call_parser.add_argument("params", nargs="*", type=parse_assignment, metavar="KEY=VALUE")

    joiner_parser = subparsers.add_parser("joiner", help="Manage joiners")
    joiner_sub = joiner_parser.add_subparsers(dest="action")
    add_parser = joiner_sub.add_parser("add", help="Allow a joiner")
    add_parser.add_argument("eui64", help="Joiner EUI-64 (hex) or *")
    add_parser.add_argument("pskd", help="Joiner pre-shared key")
    remove_parser = joiner_sub.add_parser("remove", help="Remove a joiner")
    remove_parser.add_argument("eui64", help="Joiner EUI-64 (hex) or *")
    joiner_sub.add_parser("list", help="List joiners")

    commissioner_parser = subparsers.add_parser("commissioner", help="Commissioner control")
    commissioner_sub = commissioner_parser.add_subparsers(dest="action")
    commissioner_sub.add_parser("start", help="Start the commissioner")

    pskc_parser = subparsers.add_parser("pskc", help="Compute a PSKc offline")
    pskc_parser.add_argument("passphrase")
    pskc_parser.add_argument("networkname")
    pskc_parser.add_argument("extpanid", help="Extended PAN ID (16 hex digits)")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "pskc":
        return pskc(args.passphrase, args.networkname, args.extpanid)

    cli = BorderCtl(args.socket)

    if args.command == "status":
        return cli.status()
    elif args.command == "scan":
        return cli.scan()
    elif args.command == "neighbors":
        return cli.neighbors()
    elif args.command == "networkdata":
        return cli.networkdata()
    elif args.command == "get":
        return cli.get(args.field)
    elif args.command == "set":
        return cli.set(args.field, args.value)
    elif args.command == "call":
        return cli.call(args.method, args.params)
    elif args.command == "joiner" and args.action == "add":
        return cli.joiner_add(args.eui64, args.pskd)
    elif args.command == "joiner" and args.action == "remove":
        return cli.joiner_remove(args.eui64)
    elif args.command == "joiner" and args.action == "list":
        return cli.joiner_list()
    elif args.command == "commissioner" and args.action == "start":
        return cli.commissioner_start()
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
