"""
Load and parse tile rule files.

Format:
    [TILE_0]
    up=0 1
    down=0
    left=0 1
    right=0 1
    weight=2.5

Tile ids are assigned by order of appearance; the number in the header
is informational only.
"""

import re
from pathlib import Path
from typing import Dict, List, Optional, Set, Union

from ..logging_config import get_logger
from .tile import DIRECTIONS, Ruleset, Tile

logger = get_logger(__name__)

_HEADER = re.compile(r'^\[\s*TILE_[^\]]*\]$', re.IGNORECASE)
_DIRECTION_KEYS = {d.key for d in DIRECTIONS}


class _TileDraft:
    """Accumulates key=value lines for one tile section."""

    def __init__(self, header: str, line_no: int):
        self.header = header
        self.line_no = line_no
        self.sides: Dict[str, Set[int]] = {key: set() for key in _DIRECTION_KEYS}
        self.weight = 1.0

    def build(self, tile_id: int) -> Tile:
        return Tile(
            id=tile_id,
            up=frozenset(self.sides['up']),
            down=frozenset(self.sides['down']),
            left=frozenset(self.sides['left']),
            right=frozenset(self.sides['right']),
            weight=self.weight
        )


class RulesLoader:
    """Loader for plain-text tile rule files."""

    @staticmethod
    def load(filepath: Union[str, Path]) -> Ruleset:
        """
        Load a rule file and return a Ruleset.

        Args:
            filepath: Path to the rule file

        Returns:
            Validated Ruleset

        Raises:
            FileNotFoundError: If file doesn't exist
            EmptyRulesetError: If the file defines no tiles
            InvalidRuleError: If a tile references an unknown tile id
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {filepath}")

        logger.info(f"Loading rules from {path}")
        return RulesLoader.parse(path.read_text(encoding='utf-8'), source=str(path))

    @staticmethod
    def parse(text: str, source: str = "<string>") -> Ruleset:
        """
        Parse rule-file text into a Ruleset.

        Malformed key=value lines are skipped with a warning; unknown keys
        are ignored.
        """
        drafts: List[_TileDraft] = []
        current: Optional[_TileDraft] = None

        for line_no, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line or line.startswith(('#', ';')):
                continue

            if line.startswith('['):
                if _HEADER.match(line):
                    current = _TileDraft(line, line_no)
                    drafts.append(current)
                    logger.debug(f"{source}:{line_no}: new tile {len(drafts) - 1} from {line}")
                else:
                    logger.warning(f"{source}:{line_no}: ignoring unknown section {line}")
                    current = None
                continue

            if current is None:
                logger.warning(f"{source}:{line_no}: line outside a tile section skipped: {line}")
                continue

            if '=' not in line:
                logger.warning(f"{source}:{line_no}: malformed line skipped (expected key=value): {line}")
                continue

            key, value = line.split('=', 1)
            key = key.strip().lower()
            value = value.strip()

            if key in _DIRECTION_KEYS:
                try:
                    ids = [int(token) for token in value.split()]
                except ValueError:
                    logger.warning(f"{source}:{line_no}: malformed tile list skipped: {line}")
                    continue
                current.sides[key].update(ids)
            elif key == 'weight':
                try:
                    weight = float(value)
                except ValueError:
                    logger.warning(f"{source}:{line_no}: malformed weight skipped: {line}")
                    continue
                if weight <= 0:
                    logger.warning(f"{source}:{line_no}: non-positive weight skipped: {line}")
                    continue
                current.weight = weight
            else:
                logger.debug(f"{source}:{line_no}: unknown key '{key}' ignored")

        tiles = [draft.build(tile_id) for tile_id, draft in enumerate(drafts)]
        logger.info(f"Parsed {len(tiles)} tiles from {source}")
        return Ruleset.load(tiles)

    @staticmethod
    def dumps(ruleset: Ruleset) -> str:
        """Serialize a ruleset back to rule-file text."""
        sections = []
        for tile in ruleset.tiles:
            lines = [f"[TILE_{tile.id}]"]
            for direction in DIRECTIONS:
                ids = ' '.join(str(i) for i in sorted(tile.permitted(direction)))
                lines.append(f"{direction.key}={ids}")
            if tile.weight != 1.0:
                lines.append(f"weight={tile.weight}")
            sections.append('\n'.join(lines))
        return '\n\n'.join(sections) + '\n'
