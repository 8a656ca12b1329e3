# src/polsim_core/scenario/tokenizer.py
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from .exceptions import ScenarioFileError

logger = logging.getLogger(__name__)

COMMENT_CHAR = "#"


@dataclass(frozen=True)
class ScenarioLine:
    """A tokenized scenario line: the command word and its ordered arguments."""
    line_number: int
    command: str
    args: Tuple[str, ...] = ()

    @property
    def text(self) -> str:
        return " ".join((self.command,) + self.args)


def tokenize(text: str, line_number: int = 0) -> Optional[ScenarioLine]:
    """Splits one line into words. Comments run from '#' to the end of the line.
    Returns None for blank and comment-only lines."""
    words = text.split(COMMENT_CHAR, 1)[0].split()
    if not words:
        return None
    return ScenarioLine(line_number=line_number, command=words[0], args=tuple(words[1:]))


def tokenize_lines(lines: Iterable[str]) -> Iterator[ScenarioLine]:
    for number, text in enumerate(lines, start=1):
        line = tokenize(text, number)
        if line is not None:
            yield line


def read_scenario(path: Union[str, Path]) -> List[ScenarioLine]:
    path = Path(path)
    if not path.is_file():
        raise ScenarioFileError(details=f"Scenario file not found at path: {path}", file_path=path)
    try:
        with path.open("r", encoding="utf-8") as f:
            lines = list(tokenize_lines(f))
    except (OSError, UnicodeDecodeError) as e:
        raise ScenarioFileError(details=f"Could not read scenario file: {e}", file_path=path) from e
    logger.info(f"Read {len(lines)} command(s) from {path}")
    return lines
