import pytest

from detectors.types import LANDMARK_KEYS, FaceObservation, Point, Rect
from overlay.face_view import FaceGeometry, GeometryUpdate


def _seed(face_view):
    """Give every overlay field a recognisable previous value."""
    stale = (Point(-1, -1), Point(-2, -2))
    face_view.apply(GeometryUpdate(
        bounding_box=Rect.from_xywh(1, 1, 1, 1),
        **{k: stale for k in LANDMARK_KEYS}
    ))
    return stale


def _redraws(ui, face_view):
    return sum(1 for fn in ui.posted if fn == face_view.set_needs_display)


class TestLandmarkProjector:
    def test_sequential_frames_project_independently(self, projector, ui, face_view, make_face):
        projector.on_detection_complete([make_face((0.2, 0.2, 0.3, 0.3), nose=[(0.5, 0.5)])])
        ui.drain()
        assert face_view.nose[0].as_tuple() == pytest.approx((35, 35))

        projector.on_detection_complete([make_face((0.5, 0.1, 0.2, 0.2), nose=[(0.5, 0.5)])])
        ui.drain()
        assert face_view.nose[0].as_tuple() == pytest.approx((60, 20))

    def test_empty_results_clear_everything(self, projector, ui, face_view):
        _seed(face_view)
        projector.on_detection_complete([])
        ui.drain()
        assert face_view.geometry == FaceGeometry.empty()
        assert face_view.bounding_box is None

    def test_none_results_clear_everything(self, projector, ui, face_view):
        _seed(face_view)
        projector.on_detection_complete(None, None)
        ui.drain()
        assert face_view.geometry == FaceGeometry.empty()

    def test_missing_groups_keep_previous_values(self, projector, ui, face_view, make_face):
        stale = _seed(face_view)
        projector.on_detection_complete([make_face(nose=[(0.0, 0.0), (1.0, 1.0)])])
        ui.drain()

        box = face_view.bounding_box
        assert (box.origin.x, box.origin.y, box.size.width, box.size.height) == pytest.approx((20, 20, 30, 30))
        assert [p.as_tuple() for p in face_view.nose] == [pytest.approx((20, 20)), pytest.approx((50, 50))]
        for key in LANDMARK_KEYS:
            if key != "nose":
                assert getattr(face_view, key) == stale

    def test_empty_group_is_treated_as_missing(self, projector, ui, face_view, make_face):
        stale = _seed(face_view)
        projector.on_detection_complete([make_face(left_eye=[])])
        ui.drain()
        assert face_view.left_eye == stale

    def test_box_only_backend_updates_box(self, projector, ui, face_view):
        stale = _seed(face_view)
        obs = FaceObservation(bounding_box=Rect.from_xywh(0.1, 0.2, 0.5, 0.4), landmarks=None)
        projector.on_detection_complete([obs])
        ui.drain()
        box = face_view.bounding_box
        assert (box.origin.x, box.origin.y) == pytest.approx((10, 20))
        assert (box.size.width, box.size.height) == pytest.approx((50, 40))
        assert face_view.face_contour == stale

    def test_only_first_face_is_used(self, projector, ui, face_view, make_face):
        first = make_face((0.1, 0.1, 0.2, 0.2), nose=[(0, 0)])
        second = make_face((0.6, 0.6, 0.2, 0.2), nose=[(0, 0)])
        projector.on_detection_complete([first, second])
        ui.drain()
        assert face_view.nose[0].as_tuple() == pytest.approx((10, 10))

    def test_group_order_and_length_preserved(self, projector, ui, face_view, make_face):
        pts = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0), (0.5, 0.5)]
        projector.on_detection_complete([make_face((0.0, 0.0, 1.0, 1.0), outer_lips=pts)])
        ui.drain()
        got = [p.as_tuple() for p in face_view.outer_lips]
        assert got == [pytest.approx((x * 100, y * 100)) for x, y in pts]

    @pytest.mark.parametrize("results", [
        [],
        None,
        "no_groups",
        "all_groups",
    ])
    def test_exactly_one_redraw_per_call(self, projector, ui, face_view, make_face, results):
        if results == "no_groups":
            results = [make_face()]
        elif results == "all_groups":
            results = [make_face(**{k: [(0.5, 0.5)] for k in LANDMARK_KEYS})]
        projector.on_detection_complete(results)
        assert _redraws(ui, face_view) == 1
        ui.drain()
        assert face_view.redraw_requests == 1

    def test_redraw_posted_after_geometry(self, projector, ui, face_view, make_face):
        projector.on_detection_complete([make_face(nose=[(0.5, 0.5)])])
        assert ui.posted[-1] == face_view.set_needs_display
        assert len(ui.posted) == 2

    def test_redraw_still_posted_when_projection_fails(self, projector, ui, face_view):
        broken = FaceObservation(bounding_box=None)
        with pytest.raises(AttributeError):
            projector.on_detection_complete([broken])
        assert _redraws(ui, face_view) == 1

    def test_reported_error_is_logged(self, projector, ui, face_view, caplog, make_face):
        with caplog.at_level("WARNING"):
            projector.on_detection_complete([make_face(nose=[(0, 0)])], RuntimeError("backend hiccup"))
        ui.drain()
        assert "backend hiccup" in caplog.text
        assert face_view.nose

    def test_uses_live_layer_geometry(self, projector, ui, face_view, unit_layer, make_face):
        projector.on_detection_complete([make_face((0.0, 0.0, 1.0, 1.0), nose=[(0.5, 0.5)])])
        ui.drain()
        assert face_view.nose[0].as_tuple() == pytest.approx((50, 50))

        unit_layer.set_bounds(200, 200)
        projector.on_detection_complete([make_face((0.0, 0.0, 1.0, 1.0), nose=[(0.5, 0.5)])])
        ui.drain()
        assert face_view.nose[0].as_tuple() == pytest.approx((100, 100))

    def test_nothing_written_before_drain(self, projector, face_view, make_face):
        projector.on_detection_complete([make_face(nose=[(0.5, 0.5)])])
        assert face_view.nose == ()
        assert face_view.redraw_requests == 0
