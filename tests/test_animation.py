import numpy as np
import pytest
from scipy.spatial.transform import Rotation

from pose_offsets.animation import OffsetAnimator, interpolate_pose
from pose_offsets.poses import translation_pose

FRAME = 1 / 60


def _rotation_z(degrees):
    pose = np.eye(4)
    pose[:3, :3] = Rotation.from_euler("z", degrees, degrees=True).as_matrix()
    return pose


def test_interpolate_translation_and_clamp():
    a = translation_pose(0, 0, 0)
    b = translation_pose(2, 4, 0)
    np.testing.assert_allclose(interpolate_pose(a, b, 0.5),
                               translation_pose(1, 2, 0), atol=1e-9)
    np.testing.assert_allclose(interpolate_pose(a, b, 2.0), b, atol=1e-9)
    np.testing.assert_allclose(interpolate_pose(a, b, -1.0), a, atol=1e-9)


def test_interpolate_rotation():
    mid = interpolate_pose(np.eye(4), _rotation_z(90), 0.5)
    np.testing.assert_allclose(mid, _rotation_z(45), atol=1e-9)


def test_interpolate_scale():
    mid = interpolate_pose(np.eye(4), np.diag([3.0, 3.0, 3.0, 1.0]), 0.5)
    np.testing.assert_allclose(mid, np.diag([2.0, 2.0, 2.0, 1.0]), atol=1e-9)


def test_animator_needs_offsets():
    with pytest.raises(ValueError):
        OffsetAnimator([])
    with pytest.raises(ValueError):
        OffsetAnimator([np.eye(4)], frames=0)


def test_animator_walks_pauses_and_wraps():
    anim = OffsetAnimator(
        [np.eye(4), translation_pose(4, 0, 0)], frames=4, pause=1.0
    )
    assert anim.state.current_index == 0
    assert anim.state.next_index == 1
    np.testing.assert_allclose(anim.pose, np.eye(4), atol=1e-9)

    xs = [anim.advance(FRAME)[0, 3] for _ in range(4)]
    np.testing.assert_allclose(xs, [1, 2, 3, 4], atol=1e-9)
    assert anim.state.current_index == 1
    assert anim.state.next_index == 0
    assert anim.state.pause_remaining == pytest.approx(1.0)

    # pause holds the last pose
    assert anim.advance(0.5)[0, 3] == pytest.approx(4.0)
    assert anim.state.pause_remaining == pytest.approx(0.5)
    assert anim.advance(0.5)[0, 3] == pytest.approx(4.0)
    assert anim.state.pause_remaining == 0.0

    # heading back to the first offset
    assert anim.advance(FRAME)[0, 3] == pytest.approx(3.0)
    assert anim.state.progress == pytest.approx(0.25)


def test_animator_without_pause():
    anim = OffsetAnimator(
        [np.eye(4), translation_pose(2, 0, 0)], frames=2, pause=0.0
    )
    xs = [anim.advance(FRAME)[0, 3] for _ in range(4)]
    np.testing.assert_allclose(xs, [1, 2, 1, 0], atol=1e-9)
    assert anim.state.current_index == 0


def test_single_offset_holds_still():
    T = translation_pose(0, 1, 0)
    anim = OffsetAnimator([T], frames=3, pause=0.0)
    for _ in range(5):
        np.testing.assert_allclose(anim.advance(FRAME), T, atol=1e-9)
    assert len(anim) == 1


def test_reset():
    anim = OffsetAnimator([np.eye(4), translation_pose(1, 0, 0)], frames=2)
    anim.advance(FRAME)
    anim.advance(FRAME)
    anim.reset()
    assert anim.state.current_index == 0
    assert anim.state.frame == 0
    assert anim.state.pause_remaining == 0.0


def test_advance_needs_elapsed_time():
    anim = OffsetAnimator([np.eye(4)], frames=2)
    with pytest.raises(TypeError):
        anim.advance()


def test_pause_runs_on_elapsed_time_not_frames():
    anim = OffsetAnimator(
        [np.eye(4), translation_pose(1, 0, 0)], frames=1, pause=0.1
    )
    anim.advance(FRAME)
    assert anim.state.pause_remaining == pytest.approx(0.1)
    anim.advance(0.0)
    assert anim.state.pause_remaining == pytest.approx(0.1)
    anim.advance(0.05)
    anim.advance(0.05)
    assert anim.state.pause_remaining == 0.0
    assert anim.state.current_index == 1
