import pytest

from broadside.battleship.coord import BOARD_SIZE, Coordinate, all_coords, format_coord, parse_coord


def test_parse_basic() -> None:
    assert parse_coord("C4") == Coordinate(2, 3)
    assert parse_coord("A1") == Coordinate(0, 0)
    assert parse_coord("J10") == Coordinate(9, 9)


def test_parse_is_case_insensitive() -> None:
    assert parse_coord("c4") == parse_coord("C4")


@pytest.mark.parametrize("token", ["", "A", "K1", "A0", "A11", "AB", "1A", "@5", "C4x", "ß1", "ﬀ1", "C 4", "A0_1", "C+4", "C٤", None])
def test_parse_rejects_bad_tokens(token) -> None:
    assert parse_coord(token) is None


def test_format() -> None:
    assert format_coord(Coordinate(2, 3)) == "C4"
    assert str(Coordinate(9, 9)) == "J10"


def test_round_trip_every_cell() -> None:
    cells = list(all_coords())
    assert len(set(cells)) == BOARD_SIZE * BOARD_SIZE
    for c in cells:
        assert parse_coord(format_coord(c)) == c


def test_coordinates_hash_by_value() -> None:
    assert {Coordinate(1, 2), Coordinate(1, 2)} == {Coordinate(1, 2)}


def test_neighbors8_in_the_middle() -> None:
    n = Coordinate(4, 4).neighbors8()
    assert len(n) == 8
    assert Coordinate(4, 4) not in n
    assert Coordinate(3, 3) in n and Coordinate(5, 5) in n


def test_neighbors8_at_corner_drops_off_grid_cells() -> None:
    assert set(Coordinate(0, 0).neighbors8()) == {Coordinate(1, 0), Coordinate(0, 1), Coordinate(1, 1)}
    assert len(Coordinate(9, 5).neighbors8()) == 5


def test_neighbors4() -> None:
    assert set(Coordinate(0, 5).neighbors4()) == {Coordinate(1, 5), Coordinate(0, 4), Coordinate(0, 6)}
