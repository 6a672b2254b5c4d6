"""Reading and writing the installation.xml document.

Document shape::

    <installation name="..." archive="...">
      <files folder="..." archive="..."/>
      <registry key="..." archive="..."/>
      <tcpip-service name="..." port="..."/>
      <startup>
        <run-sync file="..."/>
        <kill process-name="..."/>
      </startup>
      <shutdown>
        ...
      </shutdown>
    </installation>

Parsing walks start/end events through a three state machine
(options, startup, shutdown). Unknown elements are logged and skipped.
"""

from __future__ import annotations

import io
import xml.etree.ElementTree as ET
from enum import Enum, auto
from pathlib import Path
from typing import IO

from insti.constants import (
    TAG_FILES,
    TAG_INSTALLATION,
    TAG_KILL,
    TAG_REGISTRY,
    TAG_RUN_SYNC,
    TAG_SHUTDOWN,
    TAG_STARTUP,
    TAG_TCPIP_SERVICE,
)
from insti.core.manifest.model import (
    FileTree,
    KillProcess,
    LifecycleHook,
    Manifest,
    NetworkService,
    RegistryKey,
    ResourceItem,
    RunProcess,
)
from insti.exceptions import ManifestError
from insti.logger import get_logger

logger = get_logger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>\n'


class ParseMode(Enum):
    """Where the parser currently routes child elements."""

    OPTIONS = auto()
    STARTUP = auto()
    SHUTDOWN = auto()


def _parse_item(element: ET.Element) -> ResourceItem | None:
    attrs = element.attrib
    match element.tag:
        case "files":
            return FileTree(attrs.get("folder", ""), attrs.get("archive", ""))
        case "registry":
            return RegistryKey(attrs.get("key", ""), attrs.get("archive", ""))
        case "tcpip-service":
            return NetworkService(attrs.get("name", ""), attrs.get("port", ""))
    return None


def _parse_hook(element: ET.Element) -> LifecycleHook | None:
    match element.tag:
        case "run-sync":
            return RunProcess(element.attrib.get("file", ""))
        case "kill":
            return KillProcess(element.attrib.get("process-name", ""))
    return None


def parse_manifest(
    source: str | Path | IO[bytes], origin: str = ""
) -> Manifest:
    """Parse an installation.xml document.

    Args:
        source: Path of the document or a binary file object
        origin: Name used in warnings (defaults to the path)

    Returns:
        Parsed manifest

    Raises:
        ManifestError: If the XML is malformed or the root element or its
            archive attribute is missing

    """
    if not origin:
        origin = str(source) if isinstance(source, str | Path) else "<stream>"

    mode = ParseMode.OPTIONS
    identity: tuple[str, str] | None = None
    items: list[ResourceItem] = []
    hooks: dict[ParseMode, list[LifecycleHook]] = {
        ParseMode.STARTUP: [],
        ParseMode.SHUTDOWN: [],
    }

    try:
        for event, element in ET.iterparse(source, events=("start", "end")):
            if event == "end":
                if element.tag in (TAG_STARTUP, TAG_SHUTDOWN):
                    mode = ParseMode.OPTIONS
                continue

            if mode is ParseMode.OPTIONS:
                if element.tag == TAG_INSTALLATION:
                    identity = (
                        element.attrib.get("name", ""),
                        element.attrib.get("archive", ""),
                    )
                elif element.tag == TAG_STARTUP:
                    mode = ParseMode.STARTUP
                elif element.tag == TAG_SHUTDOWN:
                    mode = ParseMode.SHUTDOWN
                elif (item := _parse_item(element)) is not None:
                    items.append(item)
                else:
                    logger.warning(
                        "Error reading %s: '%s' is not a supported tag",
                        origin,
                        element.tag,
                    )
            elif (hook := _parse_hook(element)) is not None:
                hooks[mode].append(hook)
            else:
                logger.warning(
                    "Error reading %s: '%s' is not a supported tag",
                    origin,
                    element.tag,
                )
    except ET.ParseError as e:
        msg = f"Malformed XML: {e}"
        raise ManifestError(msg, origin) from e

    if identity is None:
        msg = f"Missing <{TAG_INSTALLATION}> element"
        raise ManifestError(msg, origin)

    name, archive = identity
    if not archive:
        msg = f"<{TAG_INSTALLATION}> has no archive attribute"
        raise ManifestError(msg, origin)

    return Manifest(
        name=name,
        archive=archive,
        items=items,
        startup=hooks[ParseMode.STARTUP],
        shutdown=hooks[ParseMode.SHUTDOWN],
    )


def parse_manifest_text(text: str, origin: str = "<string>") -> Manifest:
    """Parse a manifest held in memory."""
    return parse_manifest(io.BytesIO(text.encode("utf-8")), origin)


def write_item_element(parent: ET.Element, item: ResourceItem) -> ET.Element:
    """Append the element describing one resource item."""
    match item:
        case FileTree(folder=folder, archive=archive):
            return ET.SubElement(
                parent, TAG_FILES, {"folder": folder, "archive": archive}
            )
        case RegistryKey(key=key, archive=archive):
            return ET.SubElement(
                parent, TAG_REGISTRY, {"key": key, "archive": archive}
            )
        case NetworkService(name=name, port=port):
            return ET.SubElement(
                parent, TAG_TCPIP_SERVICE, {"name": name, "port": port}
            )
    msg = f"Unsupported resource item: {item!r}"
    raise TypeError(msg)


def write_hook_element(parent: ET.Element, hook: LifecycleHook) -> ET.Element:
    """Append the element describing one lifecycle hook."""
    match hook:
        case RunProcess(file=file):
            return ET.SubElement(parent, TAG_RUN_SYNC, {"file": file})
        case KillProcess(process_name=process_name):
            return ET.SubElement(
                parent, TAG_KILL, {"process-name": process_name}
            )
    msg = f"Unsupported lifecycle hook: {hook!r}"
    raise TypeError(msg)


def serialize_manifest(manifest: Manifest) -> str:
    """Render a manifest as an indented installation.xml document."""
    root = ET.Element(
        TAG_INSTALLATION, {"name": manifest.name, "archive": manifest.archive}
    )
    for item in manifest.items:
        write_item_element(root, item)

    startup = ET.SubElement(root, TAG_STARTUP)
    for hook in manifest.startup:
        write_hook_element(startup, hook)

    shutdown = ET.SubElement(root, TAG_SHUTDOWN)
    for hook in manifest.shutdown:
        write_hook_element(shutdown, hook)

    ET.indent(root, space="  ")
    return XML_DECLARATION + ET.tostring(root, encoding="unicode") + "\n"
