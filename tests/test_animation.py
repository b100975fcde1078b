import pytest
from ideaprint.charts.animation import AnimationState, BlockingScheduler, ManualScheduler, RadarAnimation

def test_idle_until_started():
    anim = RadarAnimation(duration=1.0, clock=lambda: 0.0)
    assert anim.state is AnimationState.IDLE and anim.progress==0 and not anim.interactive

def test_runs_to_settled_and_stays_there():
    sched = ManualScheduler()
    anim = RadarAnimation(duration=1.0, clock=lambda: 0.0)
    seen = []
    anim.on_frame(seen.append)
    assert anim.start(sched) is True
    assert anim.state is AnimationState.ANIMATING and sched.pending==1
    sched.fire(0.5)
    assert anim.progress==0.5 and not anim.interactive
    sched.fire(1.2)
    assert anim.state is AnimationState.SETTLED and anim.progress==1.0 and anim.interactive
    assert sched.pending==0
    assert seen==[0.5, 1.0]
    # single shot
    assert anim.start(sched) is False
    assert anim.state is AnimationState.SETTLED and sched.pending==0

def test_progress_never_goes_backwards():
    sched = ManualScheduler()
    anim = RadarAnimation(duration=2.0, clock=lambda: 10.0)
    anim.start(sched)
    sched.fire(11.0)
    sched.fire(10.2)
    assert anim.progress==0.5

def test_stop_cancels_pending_frame():
    sched = ManualScheduler()
    anim = RadarAnimation(duration=1.0, clock=lambda: 0.0)
    anim.start(sched)
    assert anim.running
    anim.stop()
    assert not anim.running and sched.pending==0
    sched.fire(5.0)
    assert anim.progress==0

def test_blocking_scheduler_drives_animation():
    now = [0.0]
    clock = lambda: now[0]
    def sleep(dt):
        now[0] += dt
    sched = BlockingScheduler(frame_interval=0.25, clock=clock, sleep=sleep)
    anim = RadarAnimation(duration=1.0, clock=clock)
    seen = []
    anim.on_frame(seen.append)
    anim.start(sched)
    frames = sched.run()
    assert frames==4
    assert seen==sorted(seen) and seen[-1]==1.0
    assert anim.state is AnimationState.SETTLED

def test_zero_duration_settles_on_first_frame():
    sched = ManualScheduler()
    anim = RadarAnimation(duration=0, clock=lambda: 0.0)
    anim.start(sched)
    sched.fire(0.0)
    assert anim.interactive

def test_failing_listener_does_not_stall():
    sched = ManualScheduler()
    anim = RadarAnimation(duration=1.0, clock=lambda: 0.0)
    def boom(progress):
        raise RuntimeError("render failed")
    anim.on_frame(boom)
    anim.start(sched)
    with pytest.raises(RuntimeError):
        sched.fire(0.5)
    assert anim.running and sched.pending==1
    with pytest.raises(RuntimeError):
        sched.fire(1.0)
    assert anim.state is AnimationState.SETTLED and sched.pending==0
