import io

import pytest

from kool.loading import (
    FAST_FRAMES,
    HIDE_CURSOR,
    SHOW_CURSOR,
    SLOW_FRAMES,
    Spinner,
    make_fast_loading,
    make_slow_loading,
)


def test_fast_loading_writes_messages():
    buf = io.StringIO()
    spinner = make_fast_loading("Loading", "Done", buf)
    assert spinner.active
    spinner.stop()
    out = buf.getvalue()
    assert not spinner.active
    assert out.startswith(HIDE_CURSOR)
    assert "Loading" in out
    assert out.endswith("Done\n" + SHOW_CURSOR)
    assert any(frame in out for frame in FAST_FRAMES)


def test_slow_loading_uses_slow_frames():
    buf = io.StringIO()
    spinner = make_slow_loading("Working", "Finished", buf)
    spinner.stop()
    assert spinner.frames == list(SLOW_FRAMES)
    assert buf.getvalue().endswith("Finished\n" + SHOW_CURSOR)


def test_stop_is_idempotent():
    buf = io.StringIO()
    spinner = make_fast_loading("a", "b", buf)
    spinner.stop()
    first = buf.getvalue()
    spinner.stop()
    assert buf.getvalue() == first


def test_stop_without_start_writes_nothing():
    buf = io.StringIO()
    spinner = Spinner(FAST_FRAMES, 0.01, "a", "b", buf)
    spinner.stop()
    assert buf.getvalue() == ""


def test_context_manager():
    buf = io.StringIO()
    with Spinner(["x"], 0.01, "msg", "end", buf) as spinner:
        assert spinner.active
    assert not spinner.active
    assert buf.getvalue().count("end\n") == 1


def test_empty_frames_rejected():
    with pytest.raises(ValueError):
        Spinner([], 0.1, "a", "b", io.StringIO())