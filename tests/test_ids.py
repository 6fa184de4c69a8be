from study_tracker.ids import IdAllocator, new_id


def test_ids_follow_the_clock():
    allocator = IdAllocator(clock=lambda: 1700000000000)
    assert allocator.next_id() == "1700000000000"


def test_same_millisecond_gives_distinct_ids():
    allocator = IdAllocator(clock=lambda: 5000)
    ids = [allocator.next_id() for _ in range(5)]
    assert ids == ["5000", "5001", "5002", "5003", "5004"]


def test_clock_going_backwards_still_increases():
    ticks = iter([9000, 8000, 9500])
    allocator = IdAllocator(clock=lambda: next(ticks))
    assert [allocator.next_id() for _ in range(3)] == ["9000", "9001", "9500"]


def test_module_allocator_never_repeats():
    ids = [new_id() for _ in range(200)]
    assert len(set(ids)) == 200
