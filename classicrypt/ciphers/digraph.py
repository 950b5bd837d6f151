"""
Digraph Substitution Cipher (5x5 key grid)
============================================

Playfair-style substitution of letter pairs through a 5x5 grid derived
from a keyword. ``J`` is merged into ``I`` so the grid holds exactly 25
distinct letters.

Grid rules for a pair at ``(r1, c1)``, ``(r2, c2)``:

* same row     -> neighbour one column right (left when decoding)
* same column  -> neighbour one row down (up when decoding)
* rectangle    -> own row, partner's column (self-inverse)

The transform is lossy: non-letters are dropped, ``J`` becomes ``I`` and
filler ``X`` symbols appear wherever the plaintext needed splitting or
padding.

Reference:
    Kahn, D. (1996). The Codebreakers (rev. ed.), pp. 198-202.
"""

from __future__ import annotations

from dataclasses import dataclass

from classicrypt.ciphers.alphabet import ALPHABET, FILLER, letters_only
from classicrypt.core.errors import MalformedInput

GRID_SIZE: int = 5

MERGED_LETTER: str = "J"
MERGED_INTO: str = "I"

GRID_ALPHABET: str = ALPHABET.replace(MERGED_LETTER, "")


def _normalise(text: str) -> str:
    return letters_only(text).replace(MERGED_LETTER, MERGED_INTO)


@dataclass(frozen=True, slots=True)
class KeyGrid:
    """Immutable 5x5 key grid, row-major.

    Build it with :meth:`from_keyword`; instances never change, so one
    grid may be shared freely between callers.
    """

    cells: tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.cells) != GRID_SIZE * GRID_SIZE or set(self.cells) != set(
            GRID_ALPHABET
        ):
            raise MalformedInput("Key grid must hold each of the 25 letters once")

    @classmethod
    def from_keyword(cls, keyword: str) -> KeyGrid:
        """Derive the grid from *keyword*.

        Keyword letters come first in first-seen order, then the rest of
        the alphabet. An empty keyword yields the bare alphabet grid.

        Raises:
            MalformedInput: If *keyword* is not a string.
        """
        if not isinstance(keyword, str):
            raise MalformedInput(
                f"Digraph keyword must be a string, got {type(keyword).__name__}"
            )
        seen: dict[str, None] = {}
        for ch in _normalise(keyword) + GRID_ALPHABET:
            seen.setdefault(ch, None)
        return cls(tuple(seen))

    @property
    def rows(self) -> list[str]:
        return [
            "".join(self.cells[i : i + GRID_SIZE])
            for i in range(0, len(self.cells), GRID_SIZE)
        ]

    def position(self, letter: str) -> tuple[int, int]:
        return divmod(self.cells.index(letter), GRID_SIZE)

    def at(self, row: int, col: int) -> str:
        return self.cells[(row % GRID_SIZE) * GRID_SIZE + (col % GRID_SIZE)]


def build_grid(keyword: str) -> KeyGrid:
    """Shorthand for :meth:`KeyGrid.from_keyword`."""
    return KeyGrid.from_keyword(keyword)


def prepare_text(text: str) -> list[tuple[str, str]]:
    """Split plaintext into encodable pairs.

    A pair of identical letters gets a filler after its first letter and
    the scan resumes at the second one; an odd tail is padded with the
    filler.
    """
    letters = _normalise(text)
    pairs: list[tuple[str, str]] = []
    i = 0
    while i < len(letters):
        first = letters[i]
        second = letters[i + 1] if i + 1 < len(letters) else FILLER
        if first == second:
            pairs.append((first, FILLER))
            i += 1
        else:
            pairs.append((first, second))
            i += 2
    return pairs


def _substitute(pairs: list[tuple[str, str]], grid: KeyGrid, step: int) -> str:
    out: list[str] = []
    for first, second in pairs:
        r1, c1 = grid.position(first)
        r2, c2 = grid.position(second)
        if r1 == r2:
            out.append(grid.at(r1, c1 + step) + grid.at(r2, c2 + step))
        elif c1 == c2:
            out.append(grid.at(r1 + step, c1) + grid.at(r2 + step, c2))
        else:
            out.append(grid.at(r1, c2) + grid.at(r2, c1))
    return "".join(out)


def encode(text: str, keyword: str) -> str:
    """Encrypt *text* under the grid derived from *keyword*."""
    grid = KeyGrid.from_keyword(keyword)
    return _substitute(prepare_text(text), grid, 1)


def decode(text: str, keyword: str) -> str:
    """Decrypt *text* under the grid derived from *keyword*.

    Input is normalised like plaintext (uppercase, letters only, J to I)
    and an odd tail is padded with the filler, but doubled letters are
    not split: ciphertext pairs are taken as they come. Filler symbols
    inserted during encoding stay in the output.
    """
    grid = KeyGrid.from_keyword(keyword)
    letters = _normalise(text)
    if len(letters) % 2:
        letters += FILLER
    pairs = [(letters[i], letters[i + 1]) for i in range(0, len(letters), 2)]
    return _substitute(pairs, grid, -1)
