# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Two-line element set parsing and validation.

TLE catalogs are plain text with one satellite per line triplet:
a name line followed by element lines 1 and 2. Element lines are
69 columns wide and end with a modulo-10 checksum over the first 68
columns (digits count their value, '-' counts 1).

No external dependencies — only stdlib re/dataclasses.
"""
import re
from dataclasses import dataclass

TLE_LINE_LENGTH = 69

_CATALOG_RE = re.compile(r"^\d{1}\s+(\d+)")


@dataclass(frozen=True)
class TwoLineElement:
    """A named two-line element set."""
    name: str
    line1: str
    line2: str

    @property
    def lines(self) -> tuple[str, str]:
        return self.line1, self.line2

    @property
    def catalog_number(self) -> str | None:
        return extract_catalog_number(self.line1)


def tle_checksum(line: str) -> int:
    """Modulo-10 checksum over the first 68 columns of an element line."""
    total = 0
    for ch in line[:TLE_LINE_LENGTH - 1]:
        if ch.isdigit():
            total += int(ch)
        elif ch == "-":
            total += 1
    return total % 10


def extract_catalog_number(line1: str) -> str | None:
    """Catalog number following the line number, e.g. '25544' from '1 25544U ...'."""
    match = _CATALOG_RE.match(line1)
    return match.group(1) if match else None


def _validate_line(line: str, number: int) -> None:
    if len(line) != TLE_LINE_LENGTH:
        raise ValueError(
            f"TLE line {number} must be {TLE_LINE_LENGTH} characters, got {len(line)}"
        )
    if not line.startswith(f"{number} "):
        raise ValueError(f"TLE line {number} must start with '{number} ': {line!r}")
    expected = tle_checksum(line)
    if not line[-1].isdigit() or int(line[-1]) != expected:
        raise ValueError(
            f"TLE line {number} checksum mismatch: expected {expected}, got {line[-1]!r}"
        )


def parse_tle(name: str, line1: str, line2: str) -> TwoLineElement:
    """
    Validate and wrap a TLE pair.

    Args:
        name: Satellite name.
        line1: Element line 1.
        line2: Element line 2.

    Returns:
        TwoLineElement with whitespace-trimmed lines.

    Raises:
        ValueError: On wrong length, line number, checksum, or mismatched
            catalog numbers.
    """
    line1 = line1.strip()
    line2 = line2.strip()
    _validate_line(line1, 1)
    _validate_line(line2, 2)
    if line1[2:7] != line2[2:7]:
        raise ValueError(
            f"TLE catalog numbers differ: {line1[2:7]!r} vs {line2[2:7]!r}"
        )
    return TwoLineElement(name=name.strip(), line1=line1, line2=line2)


def parse_tle_catalog(text: str) -> list[TwoLineElement]:
    """
    Parse a name/line1/line2 triplet catalog.

    Blank lines are ignored.

    Args:
        text: Catalog text.

    Returns:
        TwoLineElements in file order.

    Raises:
        ValueError: If the non-blank line count is not a multiple of three
            or any entry fails validation.
    """
    lines = [line.rstrip() for line in text.splitlines() if line.strip()]
    if len(lines) % 3 != 0:
        raise ValueError(
            f"TLE catalog must contain name/line1/line2 triplets, got {len(lines)} lines"
        )

    catalog: list[TwoLineElement] = []
    for i in range(0, len(lines), 3):
        name, line1, line2 = lines[i:i + 3]
        try:
            catalog.append(parse_tle(name, line1, line2))
        except ValueError as e:
            raise ValueError(f"Invalid TLE entry {name.strip()!r}: {e}") from e
    return catalog
