from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from dotenv import load_dotenv

from autostart_resolver.catalog.targets import normalize_vendor_key
from autostart_resolver.config.loader import (
    ConfigError,
    ResolverConfig,
    clean_package,
    load_config,
)
from autostart_resolver.runtime.android.controller import (
    AndroidController,
    AndroidControllerError,
    detect_single_device_serial,
)
from autostart_resolver.runtime.android.identity import read_platform_identity
from autostart_resolver.runtime.android.probe import AdbAvailabilityProbe
from autostart_resolver.service import AutostartService

EXIT_OK = 0
EXIT_DEVICE = 1
EXIT_USAGE = 2


def _json_dumps(obj: Any) -> str:
    return json.dumps(obj, indent=2, ensure_ascii=False)


def _positive_float(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"not a number: {raw!r}") from e
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0: {raw!r}")
    return value


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML/JSON config file (default: $AUTOSTART_CONFIG).",
    )
    common.add_argument("--serial", type=str, default=None, help="adb device serial.")
    common.add_argument("--adb_path", type=str, default=None, help="Path to adb binary.")
    common.add_argument(
        "--package",
        type=str,
        default=None,
        help="Own application package used for the app-details fallback.",
    )
    common.add_argument(
        "--timeout_s", type=_positive_float, default=None, help="Per adb command timeout."
    )
    common.add_argument(
        "--log_level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )

    parser = argparse.ArgumentParser(
        description="Open the best available autostart settings screen on an Android device."
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    open_p = sub.add_parser(
        "open", parents=[common], help="Resolve and launch the autostart settings screen."
    )
    open_p.add_argument(
        "--vendor",
        type=str,
        default=None,
        help="Override the device manufacturer (default: read via getprop).",
    )

    lookup_p = sub.add_parser(
        "lookup", parents=[common], help="Print the catalog entry for a vendor."
    )
    lookup_p.add_argument("vendor", type=str)

    sub.add_parser("catalog", parents=[common], help="Print the full vendor catalog.")

    probe_p = sub.add_parser(
        "probe", parents=[common], help="Check which catalog targets resolve on the device."
    )
    probe_p.add_argument(
        "--vendor", type=str, default=None, help="Probe only this vendor (default: all)."
    )

    sub.add_parser("identify", parents=[common], help="Print the device platform identity.")
    return parser


def _effective_config(args: argparse.Namespace) -> ResolverConfig:
    cfg = load_config(args.config)
    overrides = {
        "adb_path": args.adb_path,
        "serial": args.serial,
        "package": clean_package(args.package),
        "timeout_s": args.timeout_s,
    }
    return dataclasses.replace(cfg, **{k: v for k, v in overrides.items() if v is not None})


def _controller(cfg: ResolverConfig) -> AndroidController:
    serial = cfg.serial or detect_single_device_serial(adb_path=cfg.adb_path)
    return AndroidController(adb_path=cfg.adb_path, serial=serial, timeout_s=cfg.timeout_s)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="[%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )
    load_dotenv(dotenv_path=Path.cwd() / ".env")

    try:
        cfg = _effective_config(args)
    except (ConfigError, FileNotFoundError) as e:
        print(f"ERROR: invalid config: {e}", file=sys.stderr)
        return EXIT_USAGE
    catalog = cfg.build_catalog()

    if args.cmd == "catalog":
        print(_json_dumps(catalog.to_dict()))
        return EXIT_OK

    if args.cmd == "lookup":
        descriptor = catalog.lookup(args.vendor)
        print(
            _json_dumps(
                {
                    "vendor_key": normalize_vendor_key(args.vendor),
                    "descriptor": descriptor.to_dict() if descriptor is not None else None,
                }
            )
        )
        return EXIT_OK

    if args.cmd == "open" and not cfg.package:
        print(
            "ERROR: own package is required (--package, $AUTOSTART_PACKAGE or config)",
            file=sys.stderr,
        )
        return EXIT_USAGE

    try:
        controller = _controller(cfg)
    except AndroidControllerError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_DEVICE

    if args.cmd == "identify":
        print(_json_dumps(read_platform_identity(controller)))
        return EXIT_OK

    if args.cmd == "probe":
        if args.vendor is not None:
            descriptor = catalog.lookup(args.vendor)
            targets = [(normalize_vendor_key(args.vendor), descriptor)]
        else:
            targets = list(catalog.items())
        probe = AdbAvailabilityProbe(controller=controller)
        report = []
        for vendor_key, descriptor in targets:
            report.append(
                {
                    "vendor_key": vendor_key,
                    "component": descriptor.component if descriptor is not None else None,
                    "resolvable": (
                        probe.is_resolvable(descriptor) if descriptor is not None else False
                    ),
                }
            )
        print(_json_dumps(report))
        return EXIT_OK

    if args.cmd == "open":
        service = AutostartService.from_config(cfg, controller=controller)
        if args.vendor is not None:
            resolution = service.resolver.resolve(args.vendor, cfg.package)
        else:
            resolution = service.open_autostart_settings()
        print(_json_dumps(resolution.to_dict()))
        return EXIT_OK

    raise SystemExit(f"unknown subcommand: {args.cmd}")  # pragma: no cover


if __name__ == "__main__":
    raise SystemExit(main())
