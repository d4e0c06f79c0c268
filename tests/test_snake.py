"""Tests for the Snake module."""

import pytest

from snake_canvas.snake import Direction, Snake


class TestDirection:
    def test_vectors_use_canvas_axes(self):
        assert Direction.UP.value == (0, -1)
        assert Direction.DOWN.value == (0, 1)
        assert Direction.LEFT.value == (-1, 0)
        assert Direction.RIGHT.value == (1, 0)

    @pytest.mark.parametrize("direction", list(Direction))
    def test_opposite_cancels_out(self, direction):
        dx, dy = direction.value
        ox, oy = direction.opposite.value
        assert (dx + ox, dy + oy) == (0, 0)

    def test_from_vector(self):
        assert Direction.from_vector([1, 0]) == Direction.RIGHT
        assert Direction.from_vector((0, -1)) == Direction.UP

    @pytest.mark.parametrize("vector", [(0, 0), (1, 1), (2, 0), (0, -2)])
    def test_from_vector_rejects_non_unit(self, vector):
        with pytest.raises(ValueError, match="cardinal unit vector"):
            Direction.from_vector(vector)


class TestSnakeInit:
    def test_creation_from_cells(self):
        snake = Snake([(8, 8), (8, 9)])
        assert snake.head == (8, 8)
        assert snake.cells()[-1] == (8, 9)
        assert len(snake) == 2

    def test_accepts_lists(self):
        snake = Snake([[3, 4], [3, 5]])
        assert snake.cells() == ((3, 4), (3, 5))

    def test_minimum_length(self):
        with pytest.raises(ValueError, match="at least 1"):
            Snake([])


class TestSnakeMovement:
    def test_next_head(self):
        snake = Snake([(5, 5), (5, 6)])
        assert snake.next_head(Direction.UP) == (5, 4)
        assert snake.next_head(Direction.RIGHT) == (6, 5)

    def test_next_head_does_not_move(self):
        snake = Snake([(5, 5), (5, 6)])
        snake.next_head(Direction.LEFT)
        assert snake.head == (5, 5)

    def test_advance_without_growth(self):
        snake = Snake([(5, 5), (5, 6), (5, 7)])
        vacated = snake.advance((5, 4))
        assert snake.cells() == ((5, 4), (5, 5), (5, 6))
        assert vacated == (5, 7)

    def test_advance_with_growth(self):
        snake = Snake([(5, 5), (5, 6)])
        vacated = snake.advance((5, 4), grow=True)
        assert snake.cells() == ((5, 4), (5, 5), (5, 6))
        assert vacated is None


class TestSnakeOccupancy:
    def test_occupies_includes_tail(self):
        snake = Snake([(5, 5), (5, 6), (5, 7)])
        assert snake.occupies(5, 5)
        assert snake.occupies(5, 7)
        assert not snake.occupies(0, 0)
