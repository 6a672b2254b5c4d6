"""Installation manifest: model, XML document and loaders.

Public API:
    - Manifest and the item/hook variants
    - parse_manifest / serialize_manifest: installation.xml round-trip
    - load_manifest / manifest_from_default / manifest_from_archive
    - write_manifest
"""

from insti.core.manifest.document import (
    ParseMode,
    parse_manifest,
    parse_manifest_text,
    serialize_manifest,
)
from insti.core.manifest.loader import (
    load_manifest,
    manifest_from_archive,
    manifest_from_default,
    write_manifest,
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

__all__ = [
    "FileTree",
    "KillProcess",
    "LifecycleHook",
    "Manifest",
    "NetworkService",
    "ParseMode",
    "RegistryKey",
    "ResourceItem",
    "RunProcess",
    "load_manifest",
    "manifest_from_archive",
    "manifest_from_default",
    "parse_manifest",
    "parse_manifest_text",
    "serialize_manifest",
    "write_manifest",
]
