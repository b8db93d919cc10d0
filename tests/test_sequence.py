import mpmath
import pytest

from mandelzoom.precision import precision_for
from mandelzoom.sequence import (
    CENTER_IM,
    CENTER_RE,
    FrameView,
    claim_snapshot,
    frame_views,
    snapshot_name,
)


def test_snapshot_name_format():
    assert snapshot_name(0) == "snap000000.bmp"
    assert snapshot_name(123) == "snap000123.bmp"


def test_claim_creates_empty_file_once(tmp_path):
    path = claim_snapshot(tmp_path, 5, -1)
    assert path == tmp_path / snapshot_name(5)
    assert path.read_bytes() == b""
    assert claim_snapshot(tmp_path, 5, -1) is None


def test_claim_skips_frames_before_first(tmp_path):
    assert claim_snapshot(tmp_path, 2, 3) is None
    assert not (tmp_path / snapshot_name(2)).exists()
    assert claim_snapshot(tmp_path, 3, 3) == tmp_path / snapshot_name(3)


def test_claim_in_missing_directory(tmp_path):
    assert claim_snapshot(tmp_path / "absent", 0, -1) is None


def test_frames_shrink_by_factor_until_minimum():
    views = list(frame_views(0, 0, 2, 0.3, 0.5))
    assert [view.index for view in views] == list(range(len(views)))
    assert views[0].half_span == 2
    for earlier, later in zip(views, views[1:]):
        assert later.half_span == earlier.half_span * 0.5
    assert views[-1].half_span > 0.3
    assert views[-1].half_span * 0.5 <= 0.3


def test_frame_geometry_and_precision():
    for view in frame_views("0.25", "-0.5", 1, 0.01, 0.5):
        assert isinstance(view, FrameView)
        assert view.precision == precision_for(view.half_span)
        assert float(view.to_re - view.from_re) == pytest.approx(float(2 * view.half_span))
        assert float(view.to_im - view.from_im) == pytest.approx(float(1.5 * view.half_span))
        assert float((view.from_re + view.to_re) / 2) == pytest.approx(0.25)
        assert float((view.from_im + view.to_im) / 2) == pytest.approx(-0.5)


def test_default_first_frame():
    first = next(frame_views())
    assert first.index == 0
    assert first.half_span == 8
    with mpmath.workprec(2048):
        assert first.center_re == mpmath.mpf(CENTER_RE)
        assert first.center_im == mpmath.mpf(CENTER_IM)


def test_no_frames_when_start_below_minimum():
    assert list(frame_views(0, 0, 0.1, 0.2, 0.5)) == []


@pytest.mark.parametrize("factor", [1, 1.5, 0, -0.5])
def test_bad_factor_rejected(factor):
    with pytest.raises(ValueError):
        frame_views(0, 0, 2, 0.1, factor)


def test_non_positive_minimum_rejected():
    with pytest.raises(ValueError):
        frame_views(0, 0, 2, 0, 0.5)