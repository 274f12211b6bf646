"""Lightweight class-file parser that recovers a class name and its method names.

Only the constant pool, the this-class index and the field/method tables
are walked. Attribute bodies are skipped without being interpreted.
"""

import logging
import struct
from typing import Optional

from jarlens.models import ClassEntry

logger = logging.getLogger(__name__)

MAGIC = 0xCAFEBABE

TAG_UTF8 = 1
TAG_INTEGER = 3
TAG_FLOAT = 4
TAG_LONG = 5
TAG_DOUBLE = 6
TAG_CLASS = 7
TAG_STRING = 8
TAG_FIELDREF = 9
TAG_METHODREF = 10
TAG_INTERFACE_METHODREF = 11
TAG_NAME_AND_TYPE = 12
TAG_METHOD_HANDLE = 15
TAG_METHOD_TYPE = 16
TAG_DYNAMIC = 17
TAG_INVOKE_DYNAMIC = 18
TAG_MODULE = 19
TAG_PACKAGE = 20

# Payload sizes of pool entries that are skipped rather than stored
_SKIPPED_WIDTHS = {
    TAG_INTEGER: 4,
    TAG_FLOAT: 4,
    TAG_LONG: 8,
    TAG_DOUBLE: 8,
    TAG_STRING: 2,
    TAG_FIELDREF: 4,
    TAG_METHODREF: 4,
    TAG_INTERFACE_METHODREF: 4,
    TAG_NAME_AND_TYPE: 4,
    TAG_METHOD_HANDLE: 3,
    TAG_METHOD_TYPE: 2,
    TAG_DYNAMIC: 4,
    TAG_INVOKE_DYNAMIC: 4,
    TAG_MODULE: 2,
    TAG_PACKAGE: 2,
}

_PSEUDO_METHODS = {"<init>", "<clinit>"}

_U2 = struct.Struct(">H")
_U4 = struct.Struct(">I")


class ClassFormatError(ValueError):
    """Raised inside the parser when the bytes are not a readable class file."""


class ClassFileParser:
    """Cursor over the bytes of a single class file."""

    def __init__(self, data: bytes):
        self._data = data
        self._offset = 0
        self._utf8: dict[int, str] = {}
        self._classes: dict[int, int] = {}

    def parse(self) -> tuple[str, list[str]]:
        """Decode the class name and non-constructor method names.

        Raises:
            ClassFormatError: If the data is malformed or truncated
        """
        self._offset = 0
        if len(self._data) < 10:
            raise ClassFormatError("too short for a class file")
        if self._u4() != MAGIC:
            raise ClassFormatError("bad magic number")

        self._skip(4)  # minor and major version
        self._read_constant_pool()

        self._skip(2)  # access flags
        class_name = self._resolve_class(self._u2())
        if not class_name:
            raise ClassFormatError("this_class does not resolve to a name")

        self._skip(2)  # super class
        interface_count = self._u2()
        self._skip(interface_count * 2)

        for _ in range(self._u2()):
            self._read_member()

        methods = []
        for _ in range(self._u2()):
            name = self._read_member()
            if name and name not in _PSEUDO_METHODS:
                methods.append(name)

        return class_name.replace("/", "."), methods

    def _read_constant_pool(self) -> None:
        count = self._u2()
        index = 1
        while index < count:
            tag = self._u1()
            if tag == TAG_UTF8:
                length = self._u2()
                raw = self._take(length)
                self._utf8[index] = raw.decode("utf-8", errors="replace")
            elif tag == TAG_CLASS:
                self._classes[index] = self._u2()
            elif tag in _SKIPPED_WIDTHS:
                self._skip(_SKIPPED_WIDTHS[tag])
                if tag in (TAG_LONG, TAG_DOUBLE):
                    # 8-byte constants occupy two pool slots
                    index += 1
            else:
                raise ClassFormatError(f"unknown constant pool tag {tag} at slot {index}")
            index += 1

    def _read_member(self) -> Optional[str]:
        """Read one field_info/method_info record and return its name."""
        self._skip(2)  # access flags
        name = self._utf8.get(self._u2())
        self._skip(2)  # descriptor
        for _ in range(self._u2()):
            self._skip(2)  # attribute name
            self._skip(self._u4())
        return name

    def _resolve_class(self, index: int) -> Optional[str]:
        name_index = self._classes.get(index)
        if name_index is None:
            return None
        return self._utf8.get(name_index)

    def _take(self, size: int) -> bytes:
        end = self._offset + size
        if end > len(self._data):
            raise ClassFormatError(f"read past end of data at offset {self._offset}")
        chunk = self._data[self._offset:end]
        self._offset = end
        return chunk

    def _skip(self, size: int) -> None:
        if self._offset + size > len(self._data):
            raise ClassFormatError(f"skip past end of data at offset {self._offset}")
        self._offset += size

    def _u1(self) -> int:
        return self._take(1)[0]

    def _u2(self) -> int:
        return _U2.unpack(self._take(2))[0]

    def _u4(self) -> int:
        return _U4.unpack(self._take(4))[0]


def parse_class(data: bytes, simple_name: str | None = None) -> Optional[ClassEntry]:
    """Parse class-file bytes into a ClassEntry.

    Args:
        data: Raw bytes of a ``.class`` entry
        simple_name: Name to record as the simple name; defaults to the
            text after the last dot of the decoded class name

    Returns:
        The decoded entry, or None if the bytes could not be parsed
    """
    try:
        full_name, methods = ClassFileParser(data).parse()
    except ClassFormatError as exc:
        logger.debug(f"Skipping unparsable class data: {exc}")
        return None

    return ClassEntry(
        full_name=full_name,
        simple_name=simple_name or full_name.rsplit(".", 1)[-1],
        method_names=tuple(methods),
    )
