# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""Level store reading ``<index>.map`` files from a directory."""

import logging
from pathlib import Path
from typing import Union

from ..config import count_maps
from ..decoder import decode
from ..errors import LevelNotFoundError
from ..models import DEFAULT_GRID_SIZE, Level

logger = logging.getLogger(__name__)


class LevelStore:
    """
    Fetches and decodes numbered levels.

    Args:
        directory: Directory holding ``1.map``, ``2.map``, ...
        grid_size: Side length passed to the decoder
        strict: Decode in strict mode
    """

    def __init__(
        self,
        directory: Union[str, Path],
        grid_size: int = DEFAULT_GRID_SIZE,
        strict: bool = False,
    ):
        self.directory = Path(directory)
        self.grid_size = grid_size
        self.strict = strict

    def path_for(self, index: int) -> Path:
        return self.directory / f"{index}.map"

    def load(self, index: int) -> Level:
        """
        Read and decode one level.

        Raises:
            LevelNotFoundError: If the map file does not exist
            DecodeError: If the file is not valid map text
        """
        path = self.path_for(index)
        try:
            raw = path.read_bytes()
        except FileNotFoundError as e:
            raise LevelNotFoundError(f"No map file for level {index}: {path}") from e

        logger.info(f"Loading level {index} from {path}")
        return decode(raw, size=self.grid_size, strict=self.strict)

    def count(self) -> int:
        return count_maps(self.directory)
