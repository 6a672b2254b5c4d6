"""Registry subtree model and its REGEDIT4 text representation.

A registry item is backed up as one ``.reg`` style document::

    REGEDIT4

    [HKEY_LOCAL_MACHINE\\SOFTWARE\\Vendor\\App]
    @="default value"
    "InstallDir"="C:\\\\Program Files\\\\App"
    "Port"=dword:00001f90

Keys without values are not written (their values-bearing descendants
recreate them on import). String-like ``hex(2)``/``hex(7)`` payloads are
NUL terminated UTF-8 in REGEDIT4 documents and UTF-16-LE in version 5
documents, matching what each header implies.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

from insti.exceptions import RegistryError

# Value kinds, numerically identical to the winreg constants
REG_NONE = 0
REG_SZ = 1
REG_EXPAND_SZ = 2
REG_BINARY = 3
REG_DWORD = 4
REG_MULTI_SZ = 7
REG_QWORD = 11

REGEDIT4_HEADER = "REGEDIT4"
REGEDIT5_HEADER = "Windows Registry Editor Version 5.00"

_KEY_LINE = re.compile(r"^\[(-?)(.+)\]$")
_HEX_KIND = re.compile(r"^hex(?:\(([0-9a-fA-F]+)\))?:(.*)$")


@dataclass
class RegValue:
    """One named registry value.

    ``data`` is ``str`` for REG_SZ/REG_EXPAND_SZ, ``list[str]`` for
    REG_MULTI_SZ, ``int`` for REG_DWORD/REG_QWORD and ``bytes`` otherwise.
    """

    kind: int
    data: str | list[str] | int | bytes


@dataclass
class RegKeyEntry:
    """A registry key with its values and sub-keys."""

    path: str
    values: dict[str, RegValue] = field(default_factory=dict)
    keys: list[RegKeyEntry] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.path.rsplit("\\", 1)[-1]

    def is_empty(self) -> bool:
        """True when neither this key nor any descendant holds a value."""
        return not self.values and all(key.is_empty() for key in self.keys)

    def walk(self):
        """Yield this key and every descendant, parents first."""
        yield self
        for key in self.keys:
            yield from key.walk()

    def child(self, name: str) -> RegKeyEntry:
        """Return the sub-key called ``name``, creating it if needed."""
        for key in self.keys:
            if key.name.lower() == name.lower():
                return key
        key = RegKeyEntry(f"{self.path}\\{name}")
        self.keys.append(key)
        return key


_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def _quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _hex_bytes(payload: bytes) -> str:
    return ",".join(f"{byte:02x}" for byte in payload)


def _encode_strings(strings: list[str], encoding: str) -> bytes:
    terminator = "\0".encode(encoding)
    return b"".join(s.encode(encoding) + terminator for s in strings)


def _format_value(value: RegValue) -> str:
    kind, data = value.kind, value.data
    if kind == REG_SZ and isinstance(data, str):
        if _CONTROL_CHARS.search(data):
            # Quoted strings cannot span lines in a .reg document
            return f"hex(1):{_hex_bytes(_encode_strings([data], 'utf-8'))}"
        return _quote(data)
    if kind == REG_DWORD and isinstance(data, int):
        return f"dword:{data & 0xFFFFFFFF:08x}"
    if kind == REG_EXPAND_SZ and isinstance(data, str):
        return f"hex(2):{_hex_bytes(_encode_strings([data], 'utf-8'))}"
    if kind == REG_MULTI_SZ and isinstance(data, list):
        payload = _encode_strings(data, "utf-8") + b"\x00"
        return f"hex(7):{_hex_bytes(payload)}"
    if kind == REG_QWORD and isinstance(data, int):
        return f"hex(b):{_hex_bytes(data.to_bytes(8, 'little'))}"
    if kind == REG_BINARY and isinstance(data, bytes):
        return f"hex:{_hex_bytes(data)}"

    if isinstance(value.data, bytes):
        return f"hex({value.kind:x}):{_hex_bytes(value.data)}"
    msg = (
        f"Cannot export value of kind {value.kind} "
        f"holding {type(value.data)}"
    )
    raise RegistryError(msg)


def export_reg(entry: RegKeyEntry) -> str:
    """Render a subtree as a REGEDIT4 document, skipping empty keys."""
    lines = [REGEDIT4_HEADER, ""]
    for key in entry.walk():
        if not key.values:
            continue
        lines.append(f"[{key.path}]")
        for name, value in key.values.items():
            label = "@" if name == "" else _quote(name)
            lines.append(f"{label}={_format_value(value)}")
        lines.append("")
    return "\n".join(lines) + "\n"


def _logical_lines(text: str):
    # Long hex values are wrapped with a trailing backslash; quoted values
    # end in '"' and key lines in ']', so a trailing backslash always
    # continues the line.
    pending = ""
    for raw in text.splitlines():
        line = raw.strip()
        if line.endswith("\\"):
            pending += line[:-1]
            continue
        yield pending + line
        pending = ""
    if pending:
        yield pending


def _read_quoted(text: str, start: int) -> tuple[str, int]:
    """Read a quoted string beginning at ``text[start] == '"'``."""
    chars = []
    index = start + 1
    while index < len(text):
        char = text[index]
        if char == "\\" and index + 1 < len(text):
            chars.append(text[index + 1])
            index += 2
            continue
        if char == '"':
            return "".join(chars), index + 1
        chars.append(char)
        index += 1
    msg = f"Unterminated string: {text}"
    raise RegistryError(msg)


def _split_strings(payload: bytes, encoding: str) -> list[str]:
    text = payload.decode(encoding)
    parts = text.split("\0")
    while parts and parts[-1] == "":
        parts.pop()
    return parts


def _parse_value(raw: str, wide: bool) -> RegValue:  # noqa: FBT001
    encoding = "utf-16-le" if wide else "utf-8"
    if raw.startswith('"'):
        text, _ = _read_quoted(raw, 0)
        return RegValue(REG_SZ, text)
    if raw.lower().startswith("dword:"):
        return RegValue(REG_DWORD, int(raw[6:], 16))

    match = _HEX_KIND.match(raw)
    if match is None:
        msg = f"Unsupported value syntax: {raw}"
        raise RegistryError(msg)
    kind = int(match.group(1), 16) if match.group(1) else REG_BINARY
    digits = [
        part.strip() for part in match.group(2).split(",") if part.strip()
    ]
    payload = bytes(int(part, 16) for part in digits)

    if kind in (REG_SZ, REG_EXPAND_SZ):
        text = payload.decode(encoding)
        return RegValue(kind, text.removesuffix("\0"))
    if kind == REG_MULTI_SZ:
        return RegValue(REG_MULTI_SZ, _split_strings(payload, encoding))
    if kind == REG_QWORD:
        return RegValue(REG_QWORD, int.from_bytes(payload, "little"))
    return RegValue(kind, payload)


def _common_root(paths: list[str]) -> str:
    parts = [path.split("\\") for path in paths]
    common = parts[0]
    for other in parts[1:]:
        size = 0
        for left, right in zip(common, other, strict=False):
            if left.lower() != right.lower():
                break
            size += 1
        common = common[:size]
    if not common:
        msg = "Registry document spans more than one hive"
        raise RegistryError(msg)
    return "\\".join(common)


def import_reg(text: str) -> RegKeyEntry | None:
    """Parse a REGEDIT4 (or version 5) document into a subtree.

    Returns:
        Root of the subtree, or None if the document holds no keys

    Raises:
        RegistryError: If the header or a value line is not understood

    """
    lines = _logical_lines(text.lstrip("\ufeff"))
    header = next((line for line in lines if line), None)
    if header is None:
        return None
    if header not in (REGEDIT4_HEADER, REGEDIT5_HEADER):
        msg = f"Unknown registry file header: {header!r}"
        raise RegistryError(msg)
    wide = header == REGEDIT5_HEADER

    parsed: list[tuple[str, dict[str, RegValue]]] = []
    current: dict[str, RegValue] | None = None
    for line in lines:
        if not line or line.startswith(";"):
            continue
        if key_match := _KEY_LINE.match(line):
            if key_match.group(1):
                # Deletion markers are not part of an exported subtree
                current = None
                continue
            current = {}
            parsed.append((key_match.group(2), current))
            continue
        if current is None:
            continue
        if line.startswith("@="):
            name, rest = "", line[2:]
        elif line.startswith('"'):
            name, end = _read_quoted(line, 0)
            rest = line[end:].lstrip()
            if not rest.startswith("="):
                msg = f"Malformed value line: {line}"
                raise RegistryError(msg)
            rest = rest[1:].lstrip()
        else:
            msg = f"Malformed value line: {line}"
            raise RegistryError(msg)
        if rest == "-":
            continue
        current[name] = _parse_value(rest, wide)

    if not parsed:
        return None

    root = RegKeyEntry(_common_root([path for path, _ in parsed]))
    for path, values in parsed:
        node = root
        remainder = path[len(root.path) :].strip("\\")
        for name in filter(None, remainder.split("\\")):
            node = node.child(name)
        node.values.update(values)
    return root


def write_reg_file(entry: RegKeyEntry, path: Path) -> None:
    """Export a subtree to ``path``."""
    path.write_text(export_reg(entry), encoding="utf-8")


def read_reg_file(path: Path) -> RegKeyEntry | None:
    """Import a subtree from a document written by write_reg_file."""
    raw = path.read_bytes()
    if raw.startswith((b"\xff\xfe", b"\xfe\xff")):
        text = raw.decode("utf-16")
    else:
        text = raw.decode("utf-8-sig")
    return import_reg(text)
