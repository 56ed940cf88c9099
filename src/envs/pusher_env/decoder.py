# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Level decoder for ``.map`` files.

A map is ``size`` lines of ``size`` digits, written top row first. Each digit is
a ``TileKind`` code. Line ``i``, column ``j`` lands on the logical cell
``(j, size - 1 - i)`` because row 0 is the bottom of the board.

Decoding is lenient: a character that is not a digit, a short line or a missing
line becomes ``BLANK`` and a warning is recorded on the resulting ``Level``.
Only bytes that are not valid UTF-8 fail outright, unless ``strict`` is set.
"""

import logging
from typing import List, Optional

import numpy as np

from .errors import DecodeError
from .models import DEFAULT_GRID_SIZE, PLAYER_KINDS, Level, Position, TileKind

logger = logging.getLogger(__name__)


def decode(raw: bytes, size: int = DEFAULT_GRID_SIZE, strict: bool = False) -> Level:
    """
    Decode raw ``.map`` bytes into a level.

    Args:
        raw: File contents
        size: Side length of the square board
        strict: Raise instead of defaulting when the content is malformed

    Returns:
        Level with a read-only grid and the player's starting position

    Raises:
        DecodeError: If the bytes are not valid UTF-8, or if ``strict`` is set
            and any cell or the player marker is malformed
    """
    try:
        text = bytes(raw).decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"Level data is not valid UTF-8 text: {e}") from e
    return decode_text(text, size=size, strict=strict)


def decode_text(text: str, size: int = DEFAULT_GRID_SIZE, strict: bool = False) -> Level:
    """Decode an already-decoded map string. See ``decode``."""
    if size <= 0:
        raise ValueError(f"Grid size must be positive, got {size}")

    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    grid = np.zeros((size, size), dtype=np.uint8)
    warnings: List[str] = []
    position: Optional[Position] = None
    markers = 0

    if len([line for line in lines if line]) > size:
        warnings.append(f"Map has more than {size} rows; extra rows ignored")

    for i in range(size):
        line = lines[i] if i < len(lines) else ""
        if len(line) < size:
            warnings.append(f"Row {i} has {len(line)} cells, expected {size}; padded with blanks")
        elif len(line) > size:
            warnings.append(f"Row {i} has {len(line)} cells, expected {size}; extra cells ignored")

        row = size - 1 - i
        for j, char in enumerate(line[:size]):
            if not char.isdigit() or not char.isascii():
                warnings.append(f"Invalid cell {char!r} at row {i}, column {j}; using blank")
                continue
            code = int(char)
            grid[j, row] = code
            if code == TileKind.PLAYER_DOWN:
                markers += 1
                position = Position(j, row)
            elif code in PLAYER_KINDS:
                warnings.append(
                    f"Facing player tile {code} at row {i}, column {j}; "
                    f"only {int(TileKind.PLAYER_DOWN)} marks the start"
                )

    if position is None:
        warnings.append("No player marker found; player position defaults to (0, 0)")
        position = Position(0, 0)
    elif markers > 1:
        warnings.append(f"Found {markers} player markers; using the last one at {tuple(position)}")

    if warnings:
        if strict:
            raise DecodeError(f"Malformed level data ({len(warnings)} problems): {warnings[0]}", warnings)
        logger.warning(f"Decoded level with {len(warnings)} warnings, first: {warnings[0]}")

    grid.flags.writeable = False
    logger.debug(f"Decoded {size}x{size} level, player at {tuple(position)}")
    return Level(grid=grid, position=position, warnings=tuple(warnings))
