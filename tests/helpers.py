from itertools import chain, repeat

from shiftsnake.models import GameState, Item, ItemKind
from shiftsnake.terrain import empty_walls


def scripted(*values, then=0.0):
    """rng stand-in: yields *values* in order, then *then* forever."""
    stream = chain(values, repeat(then))
    return lambda: next(stream)


def walls_with(grid_size, cells):
    cols = [list(col) for col in empty_walls(grid_size)]
    for x, y in cells:
        cols[x][y] = True
    return tuple(tuple(col) for col in cols)


def make_state(snake=((2, 2), (1, 2), (0, 2)), direction="right", grid_size=10,
               walls=(), items=(), **kw):
    return GameState(
        snake=tuple(snake),
        direction=direction,
        walls=walls_with(grid_size, walls),
        items=tuple(items),
        **kw,
    )


def apple(x, y):
    return Item((x, y), ItemKind.RED_APPLE)
