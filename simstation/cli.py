#!/usr/bin/env python3
"""
SimStation CLI entry point with file + console logging
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import logging.handlers
import os
import sys
import traceback
from pathlib import Path

from simstation.__version__ import __version__

# Global logger instance
logger = None


def setup_logging(debug: bool = False, log_file: str | None = None) -> logging.Logger:
    """Setup logging to both console and file

    Args:
        debug: Enable debug level logging
        log_file: Path to log file (default: ~/.simstation.log)
    """
    global logger

    if logger is not None:
        return logger

    import simstation.log  # registers TRACE level

    logger = logging.getLogger('simstation')
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    if log_file is None:
        log_file = os.path.expanduser('~/.simstation.log')

    fmt = logging.Formatter(
        '[%(asctime)s] %(levelname)-8s %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # File handler (rotate log file when it gets too large)
    try:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10*1024*1024,  # 10 MB
            backupCount=5
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(fmt)
        logger.addHandler(file_handler)
    except OSError as e:
        print(f"Warning: Could not setup file logging: {e}", file=sys.stderr)

    # Console handler (only warnings in production, all in debug)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if debug else logging.WARNING)
    console_handler.setFormatter(fmt)
    logger.addHandler(console_handler)

    return logger


# ------------------------------------------------------------------
# Sub-command handlers
# ------------------------------------------------------------------

def _print_roster(groups) -> None:
    if not groups:
        print("No simulators found.")
        return
    for os_name, simulators in groups.items():
        print(f"{os_name}:")
        for sim in simulators:
            state = sim.state.value if sim.state else "Unknown"
            available = "" if sim.is_available in (None, True) else " (unavailable)"
            print(f"  {sim.name or '?':<32} {state:<9} {sim.udid}{available}")


async def _run(args, orchestrator, factory) -> int:
    from simstation.core.battery_status import BatteryStatusController
    from simstation.core.models import BatteryChargeState, CreateParameters, Simulator, SimulatorState

    runner = orchestrator.runner

    async def resolve(udid: str) -> Simulator:
        await orchestrator.retrieve()
        return orchestrator.find(udid) or Simulator(udid=udid)

    if args.command == 'list':
        _print_roster(await orchestrator.retrieve())

    elif args.command == 'runtimes':
        for runtime in await factory.fetch_runtimes().run(runner):
            flag = "" if runtime.is_available else " (unavailable)"
            print(f"{runtime.name:<24} {runtime.identifier}{flag}")

    elif args.command == 'devicetypes':
        for device_type in await factory.fetch_device_types().run(runner):
            print(f"{device_type.name:<40} {device_type.identifier}")

    elif args.command in ('boot', 'shutdown'):
        target = SimulatorState.BOOTED if args.command == 'boot' else SimulatorState.SHUTDOWN
        await orchestrator.set_state(await resolve(args.udid), target)
        print(f"{args.udid}: {target.value}")

    elif args.command == 'erase':
        await orchestrator.erase_content(await resolve(args.udid))
        print(f"{args.udid}: erased")

    elif args.command == 'delete':
        await orchestrator.delete(await resolve(args.udid))
        print(f"{args.udid}: deleted")

    elif args.command == 'create':
        udid = await orchestrator.create(CreateParameters(args.name, args.device_type, args.runtime))
        if udid is None:
            print("Name must be longer than 3 characters and device type/runtime must be given.",
                  file=sys.stderr)
            return 1
        await orchestrator.wait_for_refresh()
        print(udid)

    elif args.command == 'apps':
        for app in await factory.fetch_installed_applications(args.udid).run(runner):
            print(f"{app.display_name:<32} {app.bundle_identifier:<48} {app.bundle_version}")

    elif args.command == 'processes':
        for process in await factory.fetch_active_processes(args.udid).run(runner):
            print(f"{process.pid:>8} {process.status:>6}  {process.label}")

    elif args.command == 'battery':
        controller = BatteryStatusController(args.udid, runner, factory)
        if args.level is None and args.state is None:
            state = await controller.retrieve()
            print(f"{state.charge_state.value} {state.level}%")
            return 0
        await controller.retrieve()
        if args.level is not None:
            controller.update_level(args.level)
        if args.state is not None:
            controller.update_state(BatteryChargeState(args.state))
        if not await controller.apply():
            print("Battery level must be within 0..100 and state must be known.", file=sys.stderr)
            return 1
        print(f"{controller.charge_state.value} {controller.level}%")

    elif args.command == 'location':
        await factory.update_location(args.udid, args.latitude, args.longitude).run(runner)

    elif args.command == 'open-path':
        await factory.open_path(args.path).run(runner)

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='simstation',
        description='Manage iOS simulators through xcrun simctl',
    )
    parser.add_argument('--debug', action='store_true', help='Enable debug mode with verbose logging')
    parser.add_argument('--config', type=str, default=None, help='Path to config file')
    parser.add_argument('--logfile', type=str, default=None,
                        help='Path to log file (default: ~/.simstation.log)')
    parser.add_argument('--version', action='version', version='%(prog)s ' + __version__)

    sub = parser.add_subparsers(dest='command', required=True)
    sub.add_parser('list', help='List simulators grouped by OS')
    sub.add_parser('runtimes', help='List installed runtimes')
    sub.add_parser('devicetypes', help='List device types')

    for name, text in (
        ('boot', 'Boot a simulator and open it in Simulator.app'),
        ('shutdown', 'Shut a simulator down'),
        ('erase', 'Erase all content and settings, then reopen'),
        ('delete', 'Delete a simulator'),
        ('apps', 'List user-installed applications'),
        ('processes', 'List launchd processes inside a booted simulator'),
    ):
        p = sub.add_parser(name, help=text)
        p.add_argument('udid')

    create = sub.add_parser('create', help='Create a simulator')
    create.add_argument('name')
    create.add_argument('device_type', help='Device type identifier')
    create.add_argument('runtime', help='Runtime identifier')

    battery = sub.add_parser('battery', help='Show or override the status bar battery')
    battery.add_argument('udid')
    battery.add_argument('--level', type=int, default=None)
    battery.add_argument('--state', choices=['charged', 'charging', 'discharging'], default=None)

    location = sub.add_parser('location', help='Set the simulated location')
    location.add_argument('udid')
    location.add_argument('latitude', type=float)
    location.add_argument('longitude', type=float)

    open_path = sub.add_parser('open-path', help='Open a host path (data or log folder)')
    open_path.add_argument('path')

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for SimStation"""
    args = build_parser().parse_args(argv)

    log = setup_logging(debug=args.debug, log_file=args.logfile)
    log.debug("SimStation %s, command=%s, pid=%d", __version__, args.command, os.getpid())

    # Import after args parsing to avoid import-time side effects
    from simstation.commands.factory import CommandFactory
    from simstation.config import load_config, tool_paths_from_config
    from simstation.core.orchestrator import SimulatorOrchestrator
    from simstation.errors import SimStationError
    from simstation.platform.subprocess_impl import AsyncProcessRunner

    config = load_config(args.config, args.debug)
    if args.debug:
        config['debug'] = True

    factory = CommandFactory(tool_paths_from_config(config))
    orchestrator = SimulatorOrchestrator(
        AsyncProcessRunner(debug=config['debug']),
        factory,
        refresh_on_create=config['refresh_on_create'],
        debug=config['debug'],
    )

    try:
        return asyncio.run(_run(args, orchestrator, factory))

    except KeyboardInterrupt:
        log.info("Interrupted by user (Ctrl+C)")
        return 130

    except (SimStationError, ValueError) as e:
        log.error("%s: %s", type(e).__name__, e)
        log.debug(traceback.format_exc())
        return 1


if __name__ == '__main__':
    sys.exit(main())
