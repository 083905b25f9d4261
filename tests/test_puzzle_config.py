from dataclasses import replace
from pathlib import Path

import pytest

from gcdsudoku.puzzle_config import (
    DEFAULT_PUZZLE,
    InvalidConfigError,
    PuzzleConfig,
    clean,
    load_config,
)

PUZZLE_FILE = Path(__file__).resolve().parents[1] / "puzzles" / "somewhat-square.toml"
OPEN_BOARD = "." * 81


def test_default_puzzle_views():
    assert DEFAULT_PUZZLE.clues_for_row(1) == [(4, "2"), (8, "5")]
    assert DEFAULT_PUZZLE.clues_for_row(4) == []
    assert (1, "02") in DEFAULT_PUZZLE.exclusions_for_row(4)
    assert DEFAULT_PUZZLE.exclusions_for_row(6)[-3:] == [(6, "5"), (7, "5"), (8, "5")]


def test_load_config_matches_default():
    assert load_config(PUZZLE_FILE) == DEFAULT_PUZZLE


def test_dict_round_trip():
    assert PuzzleConfig.from_dict(DEFAULT_PUZZLE.to_dict()) == DEFAULT_PUZZLE
    unordered = replace(DEFAULT_PUZZLE, row_order=None)
    assert "row_order" not in unordered.to_dict()
    assert PuzzleConfig.from_dict(unordered.to_dict()) == unordered


def test_from_dict_defaults():
    config = PuzzleConfig.from_dict({"board": OPEN_BOARD, "required_digits": "1"})
    assert config.max_divisor == 111_111_111
    assert config.min_divisor == 337
    assert config.tiebreak_cols == (0, 1, 2)
    assert config.answer_row == 4
    assert config.row_order is None


def test_clean():
    assert clean(" . 1\n2 .\t") == ".12."


@pytest.mark.parametrize(
    "changes",
    [
        {"board_str": OPEN_BOARD[:-1]},
        {"board_str": "x" + OPEN_BOARD[1:]},
        {"board_str": "22" + OPEN_BOARD[2:]},
        {"board_str": "2" + "." * 8 + "2" + OPEN_BOARD[10:]},
        {"board_str": "2" + "." * 9 + "2" + OPEN_BOARD[11:]},
        {"required_digits": "a"},
        {"required_digits": "00"},
        {"required_digits": "012345678"},
        {"exclusions": ((9, 0, "1"),)},
        {"exclusions": ((0, -1, "1"),)},
        {"exclusions": ((0, 0, ""),)},
        {"exclusions": ((0, 0, "x"),)},
        {"exclusions": ((0, 0),)},
        {"exclusions": (("0", 0, "1"),)},
        {"exclusions": ((True, 0, "1"),)},
        {"exclusions": ((0, False, "1"),)},
        {"exclusions": (5,)},
        {"row_order": (0, 1, 2, 3, 4, 5, 6, 7, 7)},
        {"row_order": (0, 1, 2)},
        {"row_order": (0, 1, 2, 3, 4, 5, 6, 7, "x")},
        {"row_order": (True, 1, 2, 3, 4, 5, 6, 7, 0)},
        {"min_divisor": 0},
        {"min_divisor": 10, "max_divisor": 9},
        {"max_divisor": "big"},
        {"min_divisor": 337.5},
        {"min_divisor": True},
        {"tiebreak_cols": ()},
        {"tiebreak_cols": (9,)},
        {"tiebreak_cols": ("a",)},
        {"tiebreak_cols": (False,)},
        {"tiebreak_digit": 0},
        {"tiebreak_digit": "00"},
        {"tiebreak_digit": "a"},
        {"answer_row": 9},
        {"answer_row": "4"},
        {"required_digits": 25},
    ],
)
def test_invalid_config(changes):
    base = {"name": "t", "board_str": OPEN_BOARD, "required_digits": "0"}
    with pytest.raises(InvalidConfigError):
        PuzzleConfig(**{**base, **changes})


def test_invalid_config_is_value_error():
    assert issubclass(InvalidConfigError, ValueError)


def test_from_dict_errors():
    with pytest.raises(InvalidConfigError, match="board"):
        PuzzleConfig.from_dict({"required_digits": "0"})
    with pytest.raises(InvalidConfigError, match="Unknown"):
        PuzzleConfig.from_dict({"board": OPEN_BOARD, "required_digits": "0", "colour": "red"})


def test_load_config_bad_toml(tmp_path):
    path = tmp_path / "broken.toml"
    path.write_text("board = [unterminated", encoding="utf-8")
    with pytest.raises(InvalidConfigError):
        load_config(path)


def test_load_config_uses_file_stem_as_name(tmp_path):
    path = tmp_path / "tiny.toml"
    path.write_text(f'board = "{OPEN_BOARD}"\nrequired_digits = "05"\n', encoding="utf-8")
    config = load_config(path)
    assert config.name == "tiny"
    assert config.required_digits == "05"


@pytest.mark.parametrize(
    "changes",
    [
        {"board": 81},
        {"max_divisor": "big"},
        {"min_divisor": 1.5},
        {"tiebreak_cols": ["a"]},
        {"tiebreak_cols": 3},
        {"exclusions": [5]},
        {"exclusions": [[0, "0", "1"]]},
        {"row_order": ["x", 1, 2, 3, 4, 5, 6, 7, 8]},
        {"row_order": 7},
        {"answer_row": True},
    ],
)
def test_from_dict_rejects_wrong_types(changes):
    data = {"board": OPEN_BOARD, "required_digits": "0", **changes}
    with pytest.raises(InvalidConfigError):
        PuzzleConfig.from_dict(data)


def test_load_config_wrong_type(tmp_path):
    path = tmp_path / "typo.toml"
    path.write_text(
        f'board = "{OPEN_BOARD}"\nrequired_digits = "0"\nmax_divisor = "big"\n',
        encoding="utf-8",
    )
    with pytest.raises(InvalidConfigError, match="max_divisor"):
        load_config(path)
