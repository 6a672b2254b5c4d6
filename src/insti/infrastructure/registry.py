"""Registry backends.

The core talks to the registry through the RegistryBackend protocol:
read a subtree, write a subtree back, delete a subtree. On Windows the
winreg module provides it (32-bit registry view, as the managed
installations are 32-bit applications); elsewhere every call raises
RegistryError so registry items simply report failure.
"""

from __future__ import annotations

import sys
from typing import Protocol, runtime_checkable

from insti.core.regfile import RegKeyEntry, RegValue
from insti.exceptions import RegistryError
from insti.infrastructure.permissions import grant_registry_access
from insti.logger import get_logger

logger = get_logger(__name__)

HIVE_ALIASES = {
    "HKLM": "HKEY_LOCAL_MACHINE",
    "HKCU": "HKEY_CURRENT_USER",
    "HKCR": "HKEY_CLASSES_ROOT",
    "HKU": "HKEY_USERS",
    "HKCC": "HKEY_CURRENT_CONFIG",
}


def split_key_path(key_path: str) -> tuple[str, str]:
    """Split a registry key path into hive name and sub-key path.

    ``HKLM\\Software\\X`` gives (``HKEY_LOCAL_MACHINE``, ``Software\\X``).

    Raises:
        RegistryError: If the path does not start with a known hive

    """
    hive, _, rest = key_path.strip("\\").partition("\\")
    hive = HIVE_ALIASES.get(hive.upper(), hive.upper())
    if hive not in HIVE_ALIASES.values():
        msg = f"Unknown registry hive '{hive}'"
        raise RegistryError(msg, key_path)
    return hive, rest


@runtime_checkable
class RegistryBackend(Protocol):
    """Capability contract the registry resource needs."""

    def read_tree(self, key_path: str) -> RegKeyEntry | None:
        """Read a key and all sub-keys; None if the key does not exist."""
        ...

    def write_tree(self, entry: RegKeyEntry, *, grant_everyone: bool) -> None:
        """Create every key of ``entry`` and set its values."""
        ...

    def delete_tree(self, key_path: str) -> None:
        """Delete a key and all sub-keys; a missing key is not an error."""
        ...


class UnavailableRegistry:
    """Backend for platforms without a Windows registry."""

    def _fail(self, key_path: str) -> RegistryError:
        return RegistryError(
            f"no registry available on {sys.platform}", key_path
        )

    def read_tree(self, key_path: str) -> RegKeyEntry | None:
        raise self._fail(key_path)

    def write_tree(self, entry: RegKeyEntry, *, grant_everyone: bool) -> None:
        raise self._fail(entry.path)

    def delete_tree(self, key_path: str) -> None:
        raise self._fail(key_path)


class WindowsRegistry:
    """winreg based backend working on the 32-bit registry view."""

    def __init__(self) -> None:
        import winreg  # noqa: PLC0415

        self._winreg = winreg
        self._view = winreg.KEY_WOW64_32KEY

    def _hive(self, name: str) -> int:
        return getattr(self._winreg, name)

    def read_tree(self, key_path: str) -> RegKeyEntry | None:
        hive, sub_key = split_key_path(key_path)
        try:
            handle = self._winreg.OpenKey(
                self._hive(hive),
                sub_key,
                0,
                self._winreg.KEY_READ | self._view,
            )
        except FileNotFoundError:
            return None
        except OSError as e:
            raise RegistryError(str(e), key_path) from e

        with handle:
            return self._read_key(handle, f"{hive}\\{sub_key}".rstrip("\\"))

    def _read_key(self, handle, path: str) -> RegKeyEntry:
        winreg = self._winreg
        entry = RegKeyEntry(path)
        sub_keys, value_count, _ = winreg.QueryInfoKey(handle)
        for index in range(value_count):
            name, data, kind = winreg.EnumValue(handle, index)
            entry.values[name] = RegValue(kind, data)
        for index in range(sub_keys):
            name = winreg.EnumKey(handle, index)
            with winreg.OpenKey(
                handle, name, 0, winreg.KEY_READ | self._view
            ) as child:
                entry.keys.append(self._read_key(child, f"{path}\\{name}"))
        return entry

    def write_tree(self, entry: RegKeyEntry, *, grant_everyone: bool) -> None:
        winreg = self._winreg
        for key in entry.walk():
            hive, sub_key = split_key_path(key.path)
            try:
                with winreg.CreateKeyEx(
                    self._hive(hive),
                    sub_key,
                    0,
                    winreg.KEY_WRITE | self._view,
                ) as handle:
                    for name, value in key.values.items():
                        data = value.data
                        if value.kind == winreg.REG_MULTI_SZ and isinstance(
                            data, str
                        ):
                            data = [data]
                        winreg.SetValueEx(handle, name, 0, value.kind, data)
            except OSError as e:
                raise RegistryError(str(e), key.path) from e
        if grant_everyone:
            grant_registry_access(entry.path)

    def delete_tree(self, key_path: str) -> None:
        hive, sub_key = split_key_path(key_path)
        try:
            self._delete(self._hive(hive), sub_key)
        except FileNotFoundError:
            logger.debug("Registry key already absent: %s", key_path)
        except OSError as e:
            raise RegistryError(str(e), key_path) from e

    def _delete(self, root: int, sub_key: str) -> None:
        winreg = self._winreg
        with winreg.OpenKey(
            root, sub_key, 0, winreg.KEY_ALL_ACCESS | self._view
        ) as handle:
            while True:
                try:
                    child = winreg.EnumKey(handle, 0)
                except OSError:
                    break
                self._delete(root, f"{sub_key}\\{child}")
        winreg.DeleteKeyEx(root, sub_key, self._view, 0)


def default_registry_backend() -> RegistryBackend:
    """Pick the registry backend for the running platform."""
    if sys.platform == "win32":
        return WindowsRegistry()
    return UnavailableRegistry()
