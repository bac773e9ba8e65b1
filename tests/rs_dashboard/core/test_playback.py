from rs_dashboard.core.playback import PlaybackStatus, PlaybackTimer


def test_playback_advances_then_stops_at_max_year():
    steps = []
    timer = PlaybackTimer(max_year=2003, on_step=steps.append)

    timer.start(2000)
    while timer.running:
        timer.tick()

    assert steps == [2001, 2002, 2003]
    assert timer.status is PlaybackStatus.FINISHED
    # Terminal: further ticks do nothing
    assert timer.tick() is None
    assert steps == [2001, 2002, 2003]


def test_playback_starting_at_max_finishes_immediately():
    steps = []
    timer = PlaybackTimer(max_year=2003, on_step=steps.append)

    timer.start(2003)

    assert timer.status is PlaybackStatus.FINISHED
    assert timer.tick() is None
    assert steps == []


def test_cancel_stops_ticking():
    steps = []
    timer = PlaybackTimer(max_year=2010, on_step=steps.append)
    timer.start(2000)
    timer.tick()

    timer.cancel()

    assert timer.status is PlaybackStatus.CANCELLED
    assert timer.tick() is None
    assert steps == [2001]
