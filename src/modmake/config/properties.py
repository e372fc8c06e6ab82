"""
Reader for Java-style properties files.

Library directories declare their external modules in a
`module-uri.properties` file that maps logical module names to artifact
URIs:

    # JUnit Platform
    org.junit.platform.console=https\\://repo1.maven.org/.../console-1.5.0.jar
    org.opentest4j: lib/opentest4j-1.2.0.jar
    org.apiguardian lib/apiguardian-api-1.1.0.jar

Files are read the way the JDK's `Properties.load(InputStream)` reads them:
ISO-8859-1 text, `#`/`!` comment lines, `=`, `:` or whitespace between key
and value, backslash escapes (including `\\uXXXX`), lines continued by a
trailing backslash, and the last occurrence of a duplicate key wins.
"""

import re
from pathlib import Path
from typing import Dict, Iterator, List, Tuple

_WHITESPACE = " \t\f"
_SEPARATORS = "=:"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_HEX_DIGITS = re.compile(r"[0-9a-fA-F]{4}")


class PropertiesFileError(Exception):
    """Exception raised when a properties file cannot be parsed."""

    pass


def logical_lines(text: str) -> Iterator[str]:
    """
    Join natural lines into logical lines.

    Blank lines and comment lines are dropped. A line ending with an odd
    number of backslashes continues on the next line, whose leading
    whitespace is ignored.
    """
    pending = None
    for line in _LINE_BREAK.split(text):
        stripped = line.lstrip(_WHITESPACE)
        if pending is None and (not stripped or stripped[0] in "#!"):
            continue
        trailing = len(stripped) - len(stripped.rstrip("\\"))
        if trailing % 2 == 1:
            pending = (pending or "") + stripped[:-1]
            continue
        yield (pending or "") + stripped
        pending = None
    if pending is not None:
        yield pending


def split_entry(line: str) -> Tuple[str, str]:
    """Split a logical line into its raw (still escaped) key and value."""
    index = 0
    escaped = False
    while index < len(line):
        char = line[index]
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char in _SEPARATORS or char in _WHITESPACE:
            break
        index += 1

    rest = line[index:].lstrip(_WHITESPACE)
    if rest and rest[0] in _SEPARATORS:
        rest = rest[1:].lstrip(_WHITESPACE)
    return line[:index], rest


def unescape(text: str) -> str:
    """
    Resolve backslash escapes.

    Raises:
        ValueError: If a `\\uXXXX` escape is malformed
    """
    chars: List[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        index += 1
        if char != "\\":
            chars.append(char)
            continue
        if index == len(text):
            break
        char = text[index]
        index += 1
        if char == "u":
            digits = text[index:index + 4]
            if not _HEX_DIGITS.fullmatch(digits):
                raise ValueError(f"Malformed \\uxxxx encoding: \\u{digits}")
            chars.append(chr(int(digits, 16)))
            index += 4
        else:
            chars.append(_ESCAPES.get(char, char))
    return "".join(chars)


class PropertiesFile:
    """
    Parser for sectionless `key=value` properties files.

    Usage:
        properties = PropertiesFile(Path("lib/test/module-uri.properties"))
        for name, uri in properties.items().items():
            ...
    """

    ENCODING = "iso-8859-1"

    def __init__(self, path: Path):
        """
        Load and parse the given properties file.

        Args:
            path: Path to the properties file

        Raises:
            PropertiesFileError: If the file doesn't exist or cannot be parsed
        """
        self.path = Path(path)

        if not self.path.is_file():
            raise PropertiesFileError(f"Properties file not found: {self.path}")

        content = self.path.read_text(encoding=self.ENCODING)
        self._entries: Dict[str, str] = {}
        try:
            for line in logical_lines(content):
                key, value = split_entry(line)
                self._entries[unescape(key)] = unescape(value)
        except ValueError as e:
            raise PropertiesFileError(f"Failed to parse {self.path}: {e}") from e

    def items(self) -> Dict[str, str]:
        """Return all properties; a redefined key keeps its first position."""
        return dict(self._entries)

    def values(self) -> List[str]:
        """Return all property values."""
        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)
