import math

import pytest

from py_arctraj import PathPoint, Pose, Quaternion, Vector, create_trajectory_config, is_almost_same
from py_arctraj.points import position_of, to_float32


class TestVector:

    def test_magnitude_and_distance(self):
        assert Vector(3, 4).magnitude() == 5
        assert Vector(1, 1, 1).distance_to(Vector(1, 4, 5)) == 5

    def test_z_defaults_to_zero(self):
        assert Vector(1.0, 2.0) == Vector(1.0, 2.0, 0.0)

    def test_arithmetic(self):
        a = Vector(-1, -2, -3)
        assert a + Vector(4, 6, 8) == Vector(3, 4, 5)
        assert a - Vector(4, 5, 6) == Vector(-5, -7, -9)
        assert a * 2 == Vector(-2, -4, -6)
        assert 2 * a == Vector(-2, -4, -6)
        assert a * Vector(4, 5, 6) == -32
        assert -a == Vector(1, 2, 3)

    def test_mul_type_error(self):
        with pytest.raises(TypeError):
            _ = Vector(1.0, 2.0, 3.0) * "x"  # type: ignore[operator]

    def test_normalize(self):
        normalized = Vector(-3, -3, -3).normalize()
        assert normalized == pytest.approx(Vector(*([-1 / math.sqrt(3)] * 3)))
        zero = Vector(0, 0, 0)
        assert zero.normalize() == zero


class TestQuaternion:

    def test_identity_default(self):
        assert Quaternion() == Quaternion(0.0, 0.0, 0.0, 1.0)
        assert Quaternion().to_rpy() == (0.0, 0.0, 0.0)

    @pytest.mark.parametrize("rpy", [(0.0, 0.0, 1.0), (0.1, -0.4, 2.5), (-0.3, 0.2, -3.0)])
    def test_rpy_round_trip(self, rpy):
        q = Quaternion.from_rpy(*rpy)
        assert q.dot(q) == pytest.approx(1.0)
        assert q.to_rpy() == pytest.approx(rpy)

    def test_slerp_midpoint(self):
        a = Quaternion.from_rpy(0.0, 0.0, 0.0)
        b = Quaternion.from_rpy(0.0, 0.0, math.pi / 2)
        assert a.slerp(b, 0.0) == pytest.approx(a)
        assert a.slerp(b, 1.0) == pytest.approx(b)
        assert a.slerp(b, 0.5).yaw() == pytest.approx(math.pi / 4)

    def test_slerp_takes_shorter_arc(self):
        a = Quaternion.from_rpy(0.0, 0.0, 3.0)
        b = Quaternion.from_rpy(0.0, 0.0, -3.0)
        middle = a.slerp(b, 0.5).yaw()
        assert abs(middle) == pytest.approx(math.pi)

    def test_slerp_nearly_parallel(self):
        a = Quaternion.from_rpy(0.0, 0.0, 0.5)
        b = Quaternion.from_rpy(0.0, 0.0, 0.5 + 1e-6)
        assert a.slerp(b, 0.5).yaw() == pytest.approx(0.5 + 5e-7)

    def test_normalize_degenerate(self):
        assert Quaternion(0.0, 0.0, 0.0, 0.0).normalize() == Quaternion()


class TestSamples:

    def test_position_of(self):
        v = Vector(1.0, 2.0, 3.0)
        assert position_of(v) is v
        assert position_of(Pose(v)) == v
        assert position_of(PathPoint(Pose(v), 1.0)) == v
        assert position_of((1, 2)) == Vector(1.0, 2.0, 0.0)
        assert position_of([1, 2, 3]) == v
        with pytest.raises(TypeError):
            position_of((1.0, 2.0, 3.0, 4.0))

    def test_to_float32(self):
        assert to_float32(0.5) == 0.5
        assert to_float32(0.1) == pytest.approx(0.1, rel=1e-7)
        assert to_float32(0.1) != 0.1


class TestIsAlmostSame:

    def test_positions(self):
        assert is_almost_same(Vector(0.0, 0.0), Vector(0.005, 0.0))
        assert not is_almost_same(Vector(0.0, 0.0), Vector(0.02, 0.0))
        assert is_almost_same(Pose(Vector(0.0, 0.0)), Pose(Vector(0.0, 0.005)))

    def test_path_point_kinematics(self):
        pose = Pose(Vector(0.0, 0.0))
        assert is_almost_same(PathPoint(pose, 5.0), PathPoint(pose, 5.0005))
        assert not is_almost_same(PathPoint(pose, 5.0), PathPoint(pose, 0.0))
        assert not is_almost_same(PathPoint(pose, 5.0, 0.0, 0.1), PathPoint(pose, 5.0, 0.0, 0.0))

    def test_explicit_config(self):
        config = create_trajectory_config({'points_minimum_dist_threshold': 1.0})
        assert is_almost_same(Vector(0.0, 0.0), Vector(0.5, 0.0), config)
        assert not is_almost_same(Vector(0.0, 0.0), Vector(0.5, 0.0))
