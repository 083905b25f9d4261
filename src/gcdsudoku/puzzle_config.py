"""Puzzle configuration: clue grid, row rules, divisor bounds and tie-break parameters."""

import tomllib
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

from gcdsudoku.board import BOX_INDICES, GRID_SIZE

DIGITS = "0123456789"
"""The ten-symbol alphabet."""

Exclusion = tuple[int, int, str]
"""A disallowed-value rule: (row, col, forbidden digits)."""


class InvalidConfigError(ValueError):
    """Exception raised for malformed puzzle configurations."""

    pass


@dataclass(frozen=True)
class PuzzleConfig:
    """A puzzle configuration."""

    name: str
    """Short name, used for log paths and reports."""

    board_str: str
    """Fixed clues in row-major order (81 characters).

    Clue cells are represented by digits, open cells by dots ('.').
    """

    required_digits: str
    """Digits that every row must contain."""

    exclusions: tuple[Exclusion, ...] = ()
    """Disallowed-value rules as (row, col, forbidden digits) triples."""

    row_order: tuple[int, ...] | None = None
    """Row visitation order for the grid solver.

    If None, rows are visited in ascending order of candidate count.
    """

    max_divisor: int = 111_111_111
    """Largest divisor tried (inclusive)."""

    min_divisor: int = 337
    """Smallest divisor tried (inclusive)."""

    tiebreak_cols: tuple[int, ...] = (0, 1, 2)
    """Columns of which at least one must contain `tiebreak_digit` in an accepted grid."""

    tiebreak_digit: str = "0"
    """Digit searched for by the tie-break predicate."""

    answer_row: int = 4
    """Row reported as the answer (the middle row by default)."""

    def __post_init__(self) -> None:
        """Validate the configuration."""
        for field_name in ("board_str", "required_digits", "tiebreak_digit"):
            if not isinstance(getattr(self, field_name), str):
                raise InvalidConfigError(
                    f"{field_name} must be a string, got {getattr(self, field_name)!r}."
                )
        for field_name in ("min_divisor", "max_divisor", "answer_row"):
            if not _is_int(getattr(self, field_name)):
                raise InvalidConfigError(
                    f"{field_name} must be an integer, got {getattr(self, field_name)!r}."
                )

        if len(self.board_str) != GRID_SIZE * GRID_SIZE:
            raise InvalidConfigError(
                f"Board string has {len(self.board_str)} cells, expected {GRID_SIZE * GRID_SIZE}."
            )
        board_chars = set(self.board_str)
        valid_chars = set(DIGITS + ".")
        if not board_chars.issubset(valid_chars):
            raise InvalidConfigError(
                f"Board contains invalid characters: {sorted(board_chars - valid_chars)}"
            )
        self._check_clue_conflicts()

        if not set(self.required_digits).issubset(DIGITS):
            raise InvalidConfigError(f"Required digits must be digits: '{self.required_digits}'")
        if len(set(self.required_digits)) != len(self.required_digits):
            raise InvalidConfigError(f"Required digits repeat: '{self.required_digits}'")
        if len(self.required_digits) >= GRID_SIZE:
            raise InvalidConfigError(
                f"At most {GRID_SIZE - 1} required digits are allowed, "
                f"got {len(self.required_digits)}."
            )

        for rule in self.exclusions:
            if not isinstance(rule, (tuple, list)) or len(rule) != 3:
                raise InvalidConfigError(f"Exclusion must be (row, col, digits), got {rule!r}.")
            row, col, forbidden = rule
            if not (_is_int(row) and _is_int(col) and isinstance(forbidden, str)):
                raise InvalidConfigError(f"Exclusion must be (int, int, str), got {rule!r}.")
            if not (0 <= row < GRID_SIZE and 0 <= col < GRID_SIZE):
                raise InvalidConfigError(f"Exclusion {rule!r} is outside the 9x9 grid.")
            if not forbidden or not set(forbidden).issubset(DIGITS):
                raise InvalidConfigError(f"Exclusion {rule!r} must forbid one or more digits.")

        if self.row_order is not None and (
            not all(_is_int(r) for r in self.row_order)
            or sorted(self.row_order) != list(range(GRID_SIZE))
        ):
            raise InvalidConfigError(
                f"Row order must be a permutation of 0..{GRID_SIZE - 1}, got {self.row_order}."
            )

        if not 1 <= self.min_divisor <= self.max_divisor:
            raise InvalidConfigError(
                f"Divisor bounds must satisfy 1 <= min <= max, "
                f"got min={self.min_divisor}, max={self.max_divisor}."
            )

        if not self.tiebreak_cols or any(
            not _is_int(c) or not 0 <= c < GRID_SIZE for c in self.tiebreak_cols
        ):
            raise InvalidConfigError(f"Invalid tie-break columns: {self.tiebreak_cols}")
        if len(self.tiebreak_digit) != 1 or self.tiebreak_digit not in DIGITS:
            raise InvalidConfigError(f"Tie-break symbol must be one digit: '{self.tiebreak_digit}'")

        if not 0 <= self.answer_row < GRID_SIZE:
            raise InvalidConfigError(f"Answer row out of range: {self.answer_row}")

    def _check_clue_conflicts(self) -> None:
        """Reject clue grids that repeat a digit within a row, column or box."""
        seen: set[tuple[str, int, str]] = set()
        for idx, ch in enumerate(self.board_str):
            if ch == ".":
                continue
            row, col = divmod(idx, GRID_SIZE)
            for unit in (("row", row), ("column", col), ("box", BOX_INDICES[row][col])):
                key = (unit[0], unit[1], ch)
                if key in seen:
                    raise InvalidConfigError(
                        f"Clue '{ch}' at ({row}, {col}) repeats in {unit[0]} {unit[1]}."
                    )
                seen.add(key)

    def __str__(self) -> str:
        """Return a string representation of the config."""
        lines = [
            self.board_str[r * GRID_SIZE : (r + 1) * GRID_SIZE] for r in range(GRID_SIZE)
        ]
        return f"{self.name} (required digits: {self.required_digits})\n" + "\n".join(lines)

    def clues_for_row(self, row: int) -> list[tuple[int, str]]:
        """Return the (position, digit) fixed clues of a row."""
        start = row * GRID_SIZE
        return [
            (col, ch)
            for col, ch in enumerate(self.board_str[start : start + GRID_SIZE])
            if ch != "."
        ]

    def exclusions_for_row(self, row: int) -> list[tuple[int, str]]:
        """Return the (position, forbidden digits) rules of a row, in declaration order."""
        return [(col, forbidden) for r, col, forbidden in self.exclusions if r == row]

    def to_dict(self) -> dict:
        """Return a dictionary representation of the config for serialization.

        This is useful for supplying the config to child processes via `multiprocessing`
        and for writing it back out as TOML.
        """
        ret: dict[str, object] = {
            "name": self.name,
            "board": self.board_str,
            "required_digits": self.required_digits,
            "exclusions": [list(rule) for rule in self.exclusions],
            "max_divisor": self.max_divisor,
            "min_divisor": self.min_divisor,
            "tiebreak_cols": list(self.tiebreak_cols),
            "tiebreak_digit": self.tiebreak_digit,
            "answer_row": self.answer_row,
        }
        if self.row_order is not None:
            ret["row_order"] = list(self.row_order)
        return ret

    @classmethod
    def from_dict(cls, data: dict) -> "PuzzleConfig":
        """Create a config instance from a dictionary representation.

        Raises:
            InvalidConfigError: If a key is missing or unknown, or a value has the wrong type.
        """
        try:
            board = data["board"]
            required_digits = data["required_digits"]
        except KeyError as e:
            raise InvalidConfigError(f"Missing configuration key: {e.args[0]}") from None
        if not isinstance(board, str):
            raise InvalidConfigError(f"Board must be a string, got {board!r}.")

        unknown = set(data) - {
            "name",
            "board",
            "required_digits",
            "exclusions",
            "row_order",
            "max_divisor",
            "min_divisor",
            "tiebreak_cols",
            "tiebreak_digit",
            "answer_row",
        }
        if unknown:
            raise InvalidConfigError(f"Unknown configuration keys: {sorted(unknown)}")

        defaults = cls.__dataclass_fields__
        row_order = data.get("row_order")
        try:
            exclusions = tuple(tuple(rule) for rule in data.get("exclusions", ()))
            row_order = tuple(row_order) if row_order is not None else None
            tiebreak_cols = tuple(data.get("tiebreak_cols", defaults["tiebreak_cols"].default))
        except TypeError as e:
            raise InvalidConfigError(f"Expected a list of values: {e}") from None

        # Integers are passed through unconverted so that __post_init__ can reject
        # strings, floats and booleans
        return cls(
            name=str(data.get("name", "puzzle")),
            board_str=clean(board),
            required_digits=required_digits,
            exclusions=exclusions,
            row_order=row_order,
            max_divisor=data.get("max_divisor", defaults["max_divisor"].default),
            min_divisor=data.get("min_divisor", defaults["min_divisor"].default),
            tiebreak_cols=tiebreak_cols,
            tiebreak_digit=data.get("tiebreak_digit", defaults["tiebreak_digit"].default),
            answer_row=data.get("answer_row", defaults["answer_row"].default),
        )


def _is_int(value: object) -> bool:
    """True for integers, excluding booleans."""
    return isinstance(value, int) and not isinstance(value, bool)


def clean(board_str: str) -> str:
    """Clean the board string by removing all whitespace."""
    return "".join(board_str.split())


def load_config(config_path: PathLike | str) -> PuzzleConfig:
    """Load a puzzle configuration from a TOML file.

    Args:
        config_path (PathLike | str): Path to the configuration file.

    Raises:
        InvalidConfigError: If the file is not valid TOML or describes an invalid puzzle.
    """
    path = Path(config_path).resolve()
    with open(path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise InvalidConfigError(f"Could not parse {path}: {e}") from e
    data.setdefault("name", path.stem)
    return PuzzleConfig.from_dict(data)


DEFAULT_PUZZLE = PuzzleConfig(
    name="somewhat-square",
    board_str=clean(
        """
        . . . . . . . 2 .
        . . . . 2 . . . 5
        . 2 . . . . . . .
        . . 0 . . . . . .
        . . . . . . . . .
        . . . 2 . . . . .
        . . . . 0 . . . .
        . . . . . 2 . . .
        . . . . . . 5 . .
        """
    ),
    required_digits="025",
    exclusions=(
        (0, 2, "0"), (0, 4, "0"), (0, 6, "5"), (0, 8, "5"),
        (1, 2, "0"), (1, 4, "0"),
        (2, 2, "0"), (2, 4, "0"), (2, 6, "5"), (2, 7, "5"), (2, 8, "5"),
        (3, 1, "2"), (3, 3, "2"), (3, 4, "2"), (3, 5, "2"), (3, 7, "2"), (3, 6, "5"), (3, 8, "5"),
        (4, 0, "0"), (4, 1, "02"), (4, 2, "0"), (4, 4, "02"), (4, 6, "5"), (4, 8, "5"),
        (5, 0, "0"), (5, 1, "0"), (5, 2, "0"), (5, 4, "0"), (5, 6, "5"), (5, 8, "5"),
        (6, 1, "2"), (6, 3, "2"), (6, 5, "2"), (6, 7, "2"), (6, 6, "5"), (6, 7, "5"), (6, 8, "5"),
        (7, 2, "0"), (7, 3, "0"), (7, 4, "0"), (7, 6, "5"), (7, 7, "5"), (7, 8, "5"),
        (8, 1, "2"), (8, 3, "2"), (8, 4, "2"), (8, 5, "2"), (8, 7, "2"),
        (8, 2, "0"), (8, 3, "0"), (8, 4, "0"), (8, 5, "0"),
    ),  # fmt: skip
    row_order=(1, 8, 5, 3, 6, 7, 2, 0, 4),
)
"""The "somewhat square" puzzle: nine rows sharing the largest possible divisor."""
