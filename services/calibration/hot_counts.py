"""
Reader for HB hot count files.

Format, one statement per line::

    # comment
    pvalue 0.01
    <ieta> <number of hot cells>

``ieta`` is the signed eta bin (-17 to 16). Bins that are not listed get no
hot cells.
"""

from typing import Iterable

from domain.config import CalibrationConfig
from domain.geometry import HB_ETA_DIVS


def _error(linenb: int, descr: str) -> ValueError:
    return ValueError(f"line {linenb}: {descr}")


def _to_float(linenb: int, word: str) -> float:
    try:
        return float(word)
    except ValueError:
        raise _error(linenb, f"cannot interpret '{word}' as a number") from None


def _to_int(linenb: int, word: str) -> int:
    try:
        return int(word, 10)
    except ValueError:
        raise _error(linenb, f"cannot interpret '{word}' as a number") from None


def parse_hot_counts(lines: Iterable[str]) -> CalibrationConfig:
    """
    Parse a hot count file.

    Raises:
        ValueError: With the offending line number
    """
    pvalue = 0.01
    hot_counts = [0] * HB_ETA_DIVS

    for linenb, line in enumerate(lines, start=1):
        words = []
        for word in line.split():
            if word.startswith('#'):
                break
            words.append(word)

        if not words:
            continue
        if len(words) != 2:
            raise _error(linenb, "incomplete statement")

        key, value = words
        if key == "pvalue":
            pvalue = _to_float(linenb, value)
            if not 0 < pvalue <= 1:
                raise _error(linenb, "pvalue must be in (0, 1]")
            continue

        try:
            ieta = int(key, 10)
        except ValueError:
            raise _error(linenb, f"unknown parameter '{key}'") from None
        index = ieta + HB_ETA_DIVS // 2
        if not 0 <= index < HB_ETA_DIVS:
            raise _error(linenb, "ieta out of bounds")
        count = _to_int(linenb, value)
        if count < 0:
            raise _error(linenb, "value must be positive")
        hot_counts[index] = count

    return CalibrationConfig(pvalue=pvalue, hot_counts=tuple(hot_counts))


def load_hot_counts(path: str) -> CalibrationConfig:
    """Read a hot count file from disk."""
    with open(path, 'r') as f:
        return parse_hot_counts(f)
