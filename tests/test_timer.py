from unittest import mock

from deskkit.blocks.timer import Timer


def test_everything_runs_initially():
    timer = Timer([3, 5, 0])
    assert all(timer.must_run(i) for i in (3, 5, 0))


def test_reset_value_is_largest_interval():
    intervals = [900, 4, 3, 2, 0, 10, 7200, 60, 30, 21600]
    timer = Timer(intervals)
    assert timer.reset_value == max(intervals)


def test_tick_divides_every_interval():
    intervals = [900, 4, 3, 2, 10, 7200, 60, 30, 21600]
    timer = Timer(intervals)
    assert timer.tick > 0
    assert all(i % timer.tick == 0 for i in intervals)


def test_empty_timer():
    timer = Timer([])
    assert timer.reset_value == 1
    assert timer.tick == 0


def test_zero_interval_does_not_run_after_start():
    timer = Timer([2, 0])
    timer.advance()
    assert not timer.must_run(0)


def test_time_stays_below_reset_after_advancing():
    timer = Timer([4, 6, 10])
    for _ in range(50):
        timer.advance()
        assert 0 <= timer.time < timer.reset_value


def test_run_counts_over_one_cycle():
    intervals = [2, 4, 8]
    timer = Timer(intervals)
    steps = timer.reset_value // timer.tick
    counts = {i: 0 for i in intervals}
    for _ in range(steps):
        timer.advance()
        for i in intervals:
            counts[i] += timer.must_run(i)
    assert counts == {i: timer.reset_value // i for i in intervals}


def test_arm_sets_alarm_and_advances():
    timer = Timer([2, 4])
    before = timer.time
    with mock.patch("signal.alarm") as alarm:
        timer.arm()
    alarm.assert_called_once_with(timer.tick)
    assert timer.time == (before + timer.tick) % timer.reset_value