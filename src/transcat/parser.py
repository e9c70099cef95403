"""Catalog parser.

Decodes a serialized translation-source document (``.ts`` XML) into a
``Catalog`` value. The parser is pure: it performs no lookups, keeps no
state between calls and reports every failure as ``ParseError``.

Document shape::

    <?xml version="1.0" encoding="utf-8"?>
    <!DOCTYPE TS>
    <TS version="2.1" language="vi_VN">
    <context>
        <name>TorrentContentTreeView</name>
        <message>
            <location filename="../gui/torrentcontenttreeview.cpp" line="207"/>
            <source>Normal</source>
            <comment>priority</comment>
            <translation>Bình thường</translation>
        </message>
    </context>
    </TS>

Usage:
    from transcat.parser import parse_catalog, parse_file

    catalog = parse_file("lang/app_vi.ts")
    catalog = parse_catalog(b"<TS version='2.1'>...</TS>", source="inline")
"""

from __future__ import annotations

import codecs
import os
import re
from pathlib import Path
from typing import IO, Union
from xml.etree import ElementTree as ET

from transcat.exceptions import ParseError
from transcat.protocols import (
    Catalog,
    Context,
    Location,
    MessageEntry,
    MessageStatus,
)


SUPPORTED_VERSIONS = frozenset({"1.1", "2.0", "2.1"})

CatalogInput = Union[bytes, bytearray, str, os.PathLike, IO[bytes]]

_STATUS_BY_TYPE: dict[str | None, MessageStatus] = {
    None: MessageStatus.TRANSLATED,
    "unfinished": MessageStatus.UNFINISHED,
    "obsolete": MessageStatus.OBSOLETE,
    "vanished": MessageStatus.OBSOLETE,
}

_DECLARED_ENCODING = re.compile(rb"""<\?xml[^>]*encoding\s*=\s*["']([A-Za-z0-9._:-]+)["']""")

_BOMS = (
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)


def sniff_encoding(data: bytes) -> str:
    """Guess the text encoding of a document.

    Checks for a byte-order mark, then the XML declaration, and defaults
    to UTF-8.
    """
    for bom, name in _BOMS:
        if data.startswith(bom):
            return name
    match = _DECLARED_ENCODING.search(data[:256])
    if match:
        return match.group(1).decode("ascii")
    return "utf-8"


def _decode_byte(value: str | None) -> str:
    if not value:
        raise ParseError("<byte> element without value")
    try:
        if value[0] in "xX":
            return chr(int(value[1:], 16))
        return chr(int(value))
    except ValueError:
        raise ParseError(f"invalid <byte> value {value!r}") from None


def _text_of(elem: ET.Element) -> str:
    """Element text with embedded ``<byte>`` escapes decoded."""
    parts = [elem.text or ""]
    for child in elem:
        if child.tag == "byte":
            parts.append(_decode_byte(child.get("value")))
        parts.append(child.tail or "")
    return "".join(parts)


def _variants_of(elem: ET.Element) -> tuple[str, ...]:
    return tuple(_text_of(v) for v in elem if v.tag == "lengthvariant")


def _form_text(elem: ET.Element) -> str:
    if elem.get("variants") == "yes":
        variants = _variants_of(elem)
        return variants[0] if variants else ""
    return _text_of(elem)


class _DocumentReader:
    """Walks one parsed element tree. Holds relative-location state."""

    def __init__(self, source: str | None) -> None:
        self.source = source
        self._current_file: str | None = None
        self._last_line: dict[str | None, int] = {}

    def error(self, reason: str) -> ParseError:
        return ParseError(reason, source=self.source)

    def read(self, root: ET.Element) -> Catalog:
        if root.tag != "TS":
            raise self.error(f"unexpected root element <{root.tag}>, expected <TS>")

        version = root.get("version")
        if version is not None and version not in SUPPORTED_VERSIONS:
            raise self.error(f"unsupported catalog version {version!r}")

        contexts: list[Context] = []
        for child in root:
            if child.tag == "context":
                contexts.append(self._read_context(child))
            elif child.tag == "message":
                raise self.error("<message> outside of <context>")
            # <defaultcodec>, <dependencies> and unknown elements are ignored

        return Catalog(
            locale=root.get("language") or None,
            version=version,
            contexts=tuple(contexts),
            source_language=root.get("sourcelanguage") or None,
            source=self.source,
        )

    def _read_context(self, elem: ET.Element) -> Context:
        name_elem = elem.find("name")
        if name_elem is None:
            raise self.error("<context> without <name>")
        name = _text_of(name_elem)

        messages: list[MessageEntry] = []
        for child in elem:
            if child.tag == "message":
                messages.append(self._read_message(child, name, len(messages) + 1))
            elif child.tag == "context":
                raise self.error(f"nested <context> inside context {name!r}")
        return Context(name=name, messages=tuple(messages))

    def _read_location(self, elem: ET.Element) -> Location:
        filename = elem.get("filename")
        if filename is None:
            filename = self._current_file
        else:
            self._current_file = filename

        raw_line = elem.get("line")
        if raw_line is None:
            return Location(filename, None)
        try:
            if raw_line[:1] in "+-":
                line = self._last_line.get(filename, 0) + int(raw_line)
            else:
                line = int(raw_line)
        except ValueError:
            raise self.error(f"invalid location line {raw_line!r}") from None
        self._last_line[filename] = line
        return Location(filename, line)

    def _read_message(self, elem: ET.Element, context: str, position: int) -> MessageEntry:
        numerus = elem.get("numerus") == "yes"
        source: str | None = None
        fields: dict[str, str | None] = {}
        locations: list[Location] = []
        extras: list[tuple[str, str]] = []
        translation_elem: ET.Element | None = None

        for child in elem:
            tag = child.tag
            if tag == "location":
                locations.append(self._read_location(child))
            elif tag == "source":
                source = _text_of(child)
            elif tag == "comment":
                fields["disambiguation"] = _text_of(child) or None
            elif tag == "extracomment":
                fields["extra_comment"] = _text_of(child)
            elif tag == "translatorcomment":
                fields["translator_comment"] = _text_of(child)
            elif tag == "oldsource":
                fields["old_source"] = _text_of(child)
            elif tag == "oldcomment":
                fields["old_comment"] = _text_of(child)
            elif tag == "translation":
                translation_elem = child
            elif tag.startswith("extra-"):
                extras.append((tag[len("extra-"):], _text_of(child)))
            elif tag in ("message", "context"):
                raise self.error(f"<{tag}> nested inside a message of context {context!r}")

        if source is None:
            raise self.error(f"message #{position} in context {context!r} has no <source>")

        translation = ""
        forms: tuple[str, ...] = ()
        variants: tuple[str, ...] = ()
        if translation_elem is None:
            status = MessageStatus.UNFINISHED
        else:
            type_attr = translation_elem.get("type")
            if type_attr not in _STATUS_BY_TYPE:
                raise self.error(
                    f"unknown translation type {type_attr!r} for {source!r} in context {context!r}"
                )
            status = _STATUS_BY_TYPE[type_attr]

            if numerus:
                forms = tuple(
                    _form_text(f) for f in translation_elem if f.tag == "numerusform"
                )
                if not forms and (translation_elem.text or "").strip():
                    forms = (translation_elem.text or "",)
                translation = forms[0] if forms else ""
            elif translation_elem.get("variants") == "yes":
                variants = _variants_of(translation_elem)
                translation = variants[0] if variants else ""
            else:
                translation = _text_of(translation_elem)

        return MessageEntry(
            context=context,
            source_text=source,
            translation=translation,
            status=status,
            locations=tuple(locations),
            numerus=numerus,
            numerus_forms=forms,
            variants=variants,
            extras=tuple(extras),
            **fields,
        )


class CatalogParser:
    """Parses catalog documents into ``Catalog`` values.

    The parser is stateless and may be shared between threads.

    Example:
        parser = CatalogParser()
        catalog = parser.parse(Path("lang/app_vi.ts"))
    """

    def parse(
        self,
        data: CatalogInput,
        encoding: str | None = None,
        source: str | None = None,
    ) -> Catalog:
        """Parse a document.

        Args:
            data: Raw bytes, document text, a path, or a binary file object
            encoding: Declared encoding; overrides the XML declaration
            source: Label used in error messages (defaults to the path)

        Returns:
            Parsed catalog

        Raises:
            ParseError: If the document is malformed
        """
        if isinstance(data, os.PathLike):
            path = Path(data)
            source = source or str(path)
            try:
                raw: bytes | str = path.read_bytes()
            except OSError as e:
                raise ParseError(f"cannot read catalog: {e.strerror or e}", source=source) from e
        elif isinstance(data, (bytes, bytearray)):
            raw = bytes(data)
        elif isinstance(data, str):
            raw = data
        elif hasattr(data, "read"):
            source = source or getattr(data, "name", None)
            raw = data.read()
        else:
            raise TypeError(f"unsupported catalog input: {type(data).__name__}")

        text = self._decode(raw, encoding, source)
        parser = ET.XMLParser(encoding="utf-8")
        try:
            parser.feed(text.encode("utf-8"))
            root = parser.close()
        except ET.ParseError as e:
            line, column = getattr(e, "position", (None, None))
            raise ParseError(f"malformed markup: {e}", source=source, line=line, column=column) from e

        try:
            return _DocumentReader(source).read(root)
        except ParseError as e:
            if e.source is None and source is not None:
                raise e.with_source(source) from e
            raise

    def _decode(self, raw: bytes | str, encoding: str | None, source: str | None) -> str:
        if isinstance(raw, str):
            return raw.lstrip("\ufeff")
        name = encoding or sniff_encoding(raw)
        try:
            return raw.decode(name)
        except LookupError:
            raise ParseError(f"unknown encoding {name!r}", source=source) from None
        except UnicodeDecodeError as e:
            raise ParseError(f"cannot decode catalog as {name}: {e.reason}", source=source) from e


_default_parser = CatalogParser()


def parse_catalog(
    data: CatalogInput,
    encoding: str | None = None,
    source: str | None = None,
) -> Catalog:
    """Parse a catalog document with the shared parser."""
    return _default_parser.parse(data, encoding=encoding, source=source)


def parse_file(path: str | Path, encoding: str | None = None) -> Catalog:
    """Parse a catalog file."""
    return _default_parser.parse(Path(path), encoding=encoding)
