import math

import pytest

from py_arctraj.exceptions import FailureKind, InterpolationSuccess, TrajectoryNotBuiltError
from py_arctraj.interpolation import (
    AkimaSpline,
    CubicSpline,
    InterpolationMethodEnum,
    Linear,
    Pchip,
    SphericalLinear,
    Stairstep,
    create_interpolator,
    interpolate_2_pt,
)
from py_arctraj.points import Quaternion


class TestValidation:

    @pytest.mark.parametrize(
        "bases, values, kind",
        [
            ([], [], FailureKind.EMPTY_INPUT),
            ([0.0, 1.0], [0.0], FailureKind.LENGTH_MISMATCH),
            ([1.0, 0.0], [0.0], FailureKind.LENGTH_MISMATCH),
            ([0.0, 1.0, 2.0], [0.0, 1.0, 2.0], FailureKind.INSUFFICIENT_SAMPLES),
            ([0.0, 0.0, 1.0], [0.0, 1.0, 2.0], FailureKind.INSUFFICIENT_SAMPLES),
            ([0.0, 1.0, 1.0, 2.0], [0.0, 1.0, 2.0, 3.0], FailureKind.NON_MONOTONIC_BASES),
            ([0.0, 2.0, 1.0, 3.0], [0.0, 1.0, 2.0, 3.0], FailureKind.NON_MONOTONIC_BASES),
        ],
    )
    def test_first_failing_check_gives_kind(self, bases, values, kind):
        result = CubicSpline().build(bases, values)
        assert not result
        assert result.kind == kind

    @pytest.mark.parametrize(
        "interpolator, minimum",
        [(Linear(), 2), (CubicSpline(), 4), (AkimaSpline(), 5), (Pchip(), 2),
         (Stairstep(), 2), (SphericalLinear(), 2)],
    )
    def test_minimum_required_points(self, interpolator, minimum):
        assert interpolator.minimum_required_points == minimum
        result = interpolator.build(list(range(minimum - 1)), [0.0] * (minimum - 1))
        assert not result

    def test_unbuilt_query_raises(self):
        with pytest.raises(TrajectoryNotBuiltError):
            Linear().compute(0.0)

    def test_failed_build_leaves_unbuilt(self):
        linear = Linear()
        assert linear.build([0.0, 1.0], [0.0, 1.0]) == InterpolationSuccess()
        assert linear.built
        assert not linear.build([0.0, 0.0], [0.0, 1.0])
        assert not linear.built
        with pytest.raises(TrajectoryNotBuiltError):
            linear.compute(0.5)


class TestLinear:

    def test_values_and_derivatives(self):
        linear = Linear()
        assert linear.build([0.0, 1.0, 2.0], [0.0, 2.0, 3.0])
        assert linear.compute(0.5) == pytest.approx(1.0)
        assert linear.compute(1.5) == pytest.approx(2.5)
        assert linear.compute_first_derivative(0.5) == pytest.approx(2.0)
        assert linear.compute_first_derivative(1.5) == pytest.approx(1.0)
        assert linear.compute_second_derivative(0.5) == 0.0

    def test_clamps_outside_domain(self):
        linear = Linear()
        linear.build([0.0, 1.0], [10.0, 20.0])
        assert linear.compute(-5.0) == pytest.approx(10.0)
        assert linear.compute(5.0) == pytest.approx(20.0)

    def test_interpolate_2_pt(self):
        assert interpolate_2_pt(15.0, 10.0, 30.0, 20.0, 50.0) == pytest.approx(40.0)
        with pytest.raises(ZeroDivisionError):
            interpolate_2_pt(1.0, 1.0, 0.0, 1.0, 1.0)


class TestCubicSpline:

    xs = [0.0, 1.0, 2.0, 3.0, 4.0]

    def test_passes_through_knots(self):
        ys = [x * x for x in self.xs]
        spline = CubicSpline()
        assert spline.build(self.xs, ys)
        for x, y in zip(self.xs, ys):
            assert spline.compute(x) == pytest.approx(y, abs=1e-12)

    def test_reproduces_linear_data(self):
        spline = CubicSpline()
        spline.build(self.xs, [2.0 * x + 1.0 for x in self.xs])
        for x in (0.25, 1.5, 3.75):
            assert spline.compute(x) == pytest.approx(2.0 * x + 1.0)
            assert spline.compute_first_derivative(x) == pytest.approx(2.0)
            assert spline.compute_second_derivative(x) == pytest.approx(0.0, abs=1e-12)

    def test_natural_boundary(self):
        spline = CubicSpline()
        spline.build(self.xs, [math.sin(x) for x in self.xs])
        assert spline.compute_second_derivative(0.0) == pytest.approx(0.0, abs=1e-9)
        assert spline.compute_second_derivative(4.0) == pytest.approx(0.0, abs=1e-9)

    def test_smooth_at_interior_knots(self):
        spline = CubicSpline()
        spline.build(self.xs, [0.0, 1.0, 0.0, 1.0, 0.0])
        eps = 1e-7
        for x in (1.0, 2.0, 3.0):
            assert spline.compute_first_derivative(x - eps) == pytest.approx(
                spline.compute_first_derivative(x + eps), abs=1e-5)
            assert spline.compute_second_derivative(x - eps) == pytest.approx(
                spline.compute_second_derivative(x + eps), abs=1e-5)


class TestAkimaAndPchip:

    def test_akima_reproduces_linear_data(self):
        akima = AkimaSpline()
        xs = [0.0, 1.0, 2.5, 3.0, 4.0]
        assert akima.build(xs, [3.0 * x for x in xs])
        assert akima.compute(1.75) == pytest.approx(5.25)
        assert akima.compute_first_derivative(2.75) == pytest.approx(3.0)

    def test_akima_needs_five_points(self):
        result = AkimaSpline().build([0.0, 1.0, 2.0, 3.0], [0.0, 1.0, 0.0, 1.0])
        assert result.kind == FailureKind.INSUFFICIENT_SAMPLES

    def test_pchip_is_monotone_without_overshoot(self):
        pchip = Pchip()
        assert pchip.build([0.0, 1.0, 2.0, 3.0], [0.0, 1.0, 1.0, 2.0])
        last = None
        for i in range(31):
            y = pchip.compute(i * 0.1)
            if last is not None:
                assert y >= last - 1e-12
            last = y
        # flat data stays flat
        assert pchip.compute(1.5) == pytest.approx(1.0)

    def test_pchip_two_points_is_linear(self):
        pchip = Pchip()
        pchip.build([0.0, 2.0], [0.0, 4.0])
        assert pchip.compute(0.5) == pytest.approx(1.0)
        assert pchip.compute_first_derivative(1.0) == pytest.approx(2.0)


class TestStairstep:

    def test_value_holds_until_next_sample(self):
        step = Stairstep()
        assert step.build([0.0, 1.0, 2.0, 3.0], [1.0, 1.0, 2.0, 2.0])
        assert step.compute(1.5) == 1.0
        assert step.compute(1.999) == 1.0
        assert step.compute(2.0) == 2.0
        assert step.compute(3.0) == 2.0
        assert step.compute_first_derivative(1.5) == 0.0
        assert step.compute_second_derivative(2.0) == 0.0

    def test_emits_breakpoint_before_each_value_change(self):
        emitted = []
        step = Stairstep()
        step.connect_base_addition_callback(emitted.append)
        step.build([0.0, 1.0, 2.0, 3.0], [1.0, 1.0, 2.0, 0.0])
        assert emitted == pytest.approx([2.0 - 1e-3, 3.0 - 1e-3])

    def test_breakpoint_offset_and_gap(self):
        emitted = []
        step = Stairstep(breakpoint_offset=0.5)
        step.connect_base_addition_callback(emitted.append)
        step.build([0.0, 1.0, 2.0], [0.0, 1.0, 2.0])
        assert emitted == [0.5, 1.5]

        emitted.clear()
        Stairstep(breakpoint_offset=1.5).build([0.0, 1.0], [0.0, 1.0])
        assert emitted == []

    def test_constant_values_emit_nothing(self):
        emitted = []
        step = Stairstep()
        step.connect_base_addition_callback(emitted.append)
        step.build([0.0, 1.0, 2.0], [5.0, 5.0, 5.0])
        assert emitted == []


class TestSphericalLinear:

    def test_slerp_midpoint(self):
        slerp = SphericalLinear()
        assert slerp.build([0.0, 2.0], [Quaternion(), Quaternion.from_rpy(0.0, 0.0, math.pi / 2)])
        assert slerp.compute(1.0).yaw() == pytest.approx(math.pi / 4)
        assert slerp.compute(2.0).yaw() == pytest.approx(math.pi / 2)

    def test_shorter_arc(self):
        slerp = SphericalLinear()
        q1 = Quaternion.from_rpy(0.0, 0.0, 0.5)
        negated = Quaternion(-q1.x, -q1.y, -q1.z, -q1.w)
        slerp.build([0.0, 1.0], [Quaternion(), negated])
        assert slerp.compute(0.5).yaw() == pytest.approx(0.25)


class TestClone:

    def test_clone_is_independent(self):
        spline = CubicSpline()
        spline.build([0.0, 1.0, 2.0, 3.0], [0.0, 1.0, 2.0, 3.0])
        clone = spline.clone()
        spline.build([0.0, 1.0, 2.0, 3.0], [0.0, 0.0, 0.0, 0.0])
        assert clone.compute(1.5) == pytest.approx(1.5)
        assert spline.compute(1.5) == pytest.approx(0.0)

    def test_clone_drops_callback(self):
        emitted = []
        step = Stairstep()
        step.connect_base_addition_callback(emitted.append)
        clone = step.clone()
        clone.build([0.0, 1.0], [0.0, 1.0])
        assert emitted == []
        step.build([0.0, 1.0], [0.0, 1.0])
        assert len(emitted) == 1


class TestCreateInterpolator:

    @pytest.mark.parametrize(
        "method, expected",
        [
            ("linear", Linear),
            ("cubic_spline", CubicSpline),
            ("akima", AkimaSpline),
            ("pchip", Pchip),
            ("stairstep", Stairstep),
            (InterpolationMethodEnum.SPHERICAL_LINEAR, SphericalLinear),
            (InterpolationMethodEnum.CUBIC_SPLINE, CubicSpline),
            (Pchip, Pchip),
        ],
    )
    def test_resolves(self, method, expected):
        assert type(create_interpolator(method)) is expected

    def test_instance_is_returned_as_is(self):
        linear = Linear()
        assert create_interpolator(linear) is linear

    def test_unknown(self):
        with pytest.raises(ValueError):
            create_interpolator("quintic")
        with pytest.raises(TypeError):
            create_interpolator(42)
