from mandelzoom.worklist import UpdateList


def test_push_is_not_visible_before_swap():
    work = UpdateList()
    work.push(1, 2)
    work.push(3, 4)
    assert len(work) == 0
    assert list(work.drain()) == []


def test_swap_exposes_points_in_fifo_order():
    work = UpdateList()
    points = [(0, 0), (5, 1), (2, 7), (9, 9)]
    for x, y in points:
        work.push(x, y)
    work.swap()
    assert len(work) == len(points)
    assert list(work.drain()) == points
    assert len(work) == 0


def test_pushes_during_drain_go_to_next_generation():
    work = UpdateList()
    work.push(1, 1)
    work.push(2, 2)
    work.swap()
    seen = []
    for x, y in work.drain():
        seen.append((x, y))
        work.push(x + 10, y + 10)
    assert seen == [(1, 1), (2, 2)]
    work.swap()
    assert list(work.drain()) == [(11, 11), (12, 12)]


def test_swap_discards_undrained_points():
    work = UpdateList()
    for i in range(4):
        work.push(i, i)
    work.swap()
    first = next(work.drain())
    assert first == (0, 0)
    work.push(7, 8)
    work.swap()
    assert list(work.drain()) == [(7, 8)]


def test_clear_empties_both_generations():
    work = UpdateList()
    work.push(1, 1)
    work.swap()
    work.push(2, 2)
    work.clear()
    assert len(work) == 0
    work.swap()
    assert len(work) == 0
    assert list(work.drain()) == []