import numpy as np

from voxel_march.camera import MAX_SPEED, PITCH_LIMIT, Camera


def test_default_camera_looks_down_negative_z():
    camera = Camera([0.0, 0.0, 0.0])
    np.testing.assert_allclose(camera.forward, [0, 0, -1], atol=1e-6)
    np.testing.assert_allclose(camera.right, [1, 0, 0], atol=1e-6)


def test_looking_at_points_forward_at_target():
    camera = Camera.looking_at([4.0, 3.0, 5.0], [1.0, 1.0, 1.0])
    direction = np.array([-3.0, -2.0, -4.0])
    direction /= np.linalg.norm(direction)
    np.testing.assert_allclose(camera.forward, direction, atol=1e-5)


def test_move_and_friction():
    camera = Camera([0.0, 0.0, 5.0])
    camera.move((0.0, 0.0, 1.0), 1.0)
    np.testing.assert_allclose(camera.pos, [0, 0, 5 - MAX_SPEED], atol=1e-5)

    camera.move((0.0, 0.0, 0.0), 0.0)
    np.testing.assert_allclose(camera.velocity, [0, 0, MAX_SPEED / 2])

    for _ in range(40):
        camera.move((0.0, 0.0, 0.0), 0.0)
    assert not camera.velocity.any()


def test_pitch_is_clamped():
    camera = Camera([0.0, 0.0, 0.0])
    camera.rotate(0.0, -10000.0, 800, 600)
    assert camera.pitch == PITCH_LIMIT
