"""Installed applications: ``simctl listapps <id> --json`` (binary plist)."""

from __future__ import annotations

import plistlib
from xml.parsers.expat import ExpatError

from simstation.commands.base import ShellCommand, ToolPaths
from simstation.core.models import SYSTEM_APPLICATION_TYPE, Application
from simstation.errors import DecodingError
from simstation.platform.process_adapter import CommandDescriptor, ProcessResult

REQUIRED_KEYS = (
    "ApplicationType",
    "Bundle",
    "CFBundleDisplayName",
    "CFBundleExecutable",
    "CFBundleIdentifier",
    "CFBundleName",
    "CFBundleVersion",
    "Path",
)


def parse_application(entry: dict) -> Application:
    missing = [k for k in REQUIRED_KEYS if not isinstance(entry.get(k), str)]
    if missing:
        raise DecodingError(f"Application entry is missing {', '.join(missing)}")

    groups = entry.get("GroupContainers")
    tags = entry.get("SBAppTags")
    return Application(
        application_type=entry["ApplicationType"],
        bundle=entry["Bundle"],
        display_name=entry["CFBundleDisplayName"],
        executable=entry["CFBundleExecutable"],
        bundle_identifier=entry["CFBundleIdentifier"],
        bundle_name=entry["CFBundleName"],
        bundle_version=entry["CFBundleVersion"],
        path=entry["Path"],
        data_container=entry.get("DataContainer"),
        group_containers=dict(groups) if isinstance(groups, dict) else None,
        sb_app_tags=tuple(tags) if isinstance(tags, list) else None,
    )


class FetchInstalledApplicationsCommand(ShellCommand[list]):
    """User-installed apps only; entries of type ``System`` are dropped."""

    def __init__(self, simulator_id: str, paths: ToolPaths | None = None):
        super().__init__(paths)
        self.simulator_id = simulator_id

    def descriptor(self) -> CommandDescriptor:
        return self.simctl("listapps", self.simulator_id, "--json")

    def parse(self, result: ProcessResult) -> list[Application]:
        try:
            payload = plistlib.loads(result.stdout)
        except (plistlib.InvalidFileException, ValueError, ExpatError) as exc:
            raise DecodingError(f"Invalid application property list: {exc}") from exc
        if not isinstance(payload, dict):
            raise DecodingError("Application property list is not a dictionary")

        apps = []
        for bundle_id in sorted(payload):
            entry = payload[bundle_id]
            if not isinstance(entry, dict):
                raise DecodingError(f"Application entry {bundle_id!r} is not a dictionary")
            # System entries are dropped before parsing; they may lack user-app keys
            if entry.get("ApplicationType") == SYSTEM_APPLICATION_TYPE:
                continue
            apps.append(parse_application(entry))
        return apps
