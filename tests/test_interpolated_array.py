import pytest

from py_arctraj.exceptions import TrajectoryNotBuiltError
from py_arctraj.interpolated_array import ChannelWindow, InterpolatedArray
from py_arctraj.interpolation import Linear, Stairstep


def make_velocity(values=(5.0, 5.0, 5.0, 5.0, 5.0)):
    array = InterpolatedArray(Stairstep())
    assert array.build([0.0, 1.0, 2.0, 3.0, 4.0], list(values))
    return array


class TestInterpolatedArray:

    def test_build_returns_interpolator_result(self):
        array = InterpolatedArray(Linear())
        result = array.build([0.0, 0.0], [1.0, 2.0])
        assert not result
        assert not array.built
        assert array.build([0.0, 1.0], [1.0, 2.0])
        assert array.compute(0.5) == pytest.approx(1.5)

    def test_range_set_inserts_bounds_and_assigns(self):
        array = make_velocity()
        reported = []
        array.connect_base_addition_callback(reported.append)

        assert array.range(2.5, 4.0).set(0.0)

        assert 2.5 in array.bases
        assert 2.5 - 1e-3 in array.bases
        assert array.compute(2.5 - 1e-4) == 5.0
        assert array.compute(2.5) == 0.0
        assert array.compute(3.5) == 0.0
        assert array.compute(1.0) == 5.0
        assert sorted(reported) == pytest.approx([2.5 - 1e-3, 2.5])

    def test_range_set_on_existing_bases_reports_nothing_new(self):
        array = make_velocity([1.0, 2.0, 3.0, 4.0, 5.0])
        reported = []
        array.connect_base_addition_callback(reported.append)
        array.range(1.0, 3.0).set(7.0)
        assert array.values[array.bases.index(1.0):array.bases.index(3.0)] == [7.0] * 4
        assert array.compute(0.5) == 1.0
        assert array.compute(2.5) == 7.0
        assert array.compute(3.0) == 4.0
        assert array.compute(3.5) == 4.0
        assert array.compute(4.0) == 5.0
        assert 3.0 not in reported

    def test_interior_range_end_steps_back(self):
        array = make_velocity()
        array.range(1.0, 2.5).set(0.0)
        assert array.compute(0.9) == 5.0
        assert array.compute(1.0) == 0.0
        assert array.compute(2.4) == 0.0
        assert array.compute(2.5) == 5.0
        assert array.compute(2.7) == 5.0
        assert 2.5 - 1e-3 in array.bases

    def test_linear_range_includes_end(self):
        array = InterpolatedArray(Linear())
        array.build([0.0, 1.0, 2.0, 3.0, 4.0], [0.0, 1.0, 2.0, 3.0, 4.0])
        array.range(1.0, 3.0).set(10.0)
        assert array.compute(3.0) == 10.0
        assert array.compute(3.5) == pytest.approx(7.0)
        assert array.compute(0.5) == pytest.approx(5.0)

    def test_range_is_clamped_to_domain(self):
        array = make_velocity()
        array.range(-10.0, 10.0).set(1.0)
        assert array.bases[0] == 0.0
        assert array.bases[-1] == 4.0
        assert array.compute(2.0) == 1.0

    def test_reversed_range_raises(self):
        with pytest.raises(ValueError):
            make_velocity().range(3.0, 1.0)

    def test_edit_before_build_raises(self):
        array = InterpolatedArray(Stairstep())
        with pytest.raises(TrajectoryNotBuiltError):
            array.range(0.0, 1.0).set(0.0)

    def test_callback_is_replaced(self):
        array = make_velocity()
        first, second = [], []
        array.connect_base_addition_callback(first.append)
        array.connect_base_addition_callback(second.append)
        array.range(0.5, 4.0).set(0.0)
        assert first == []
        assert 0.5 in second

    def test_on_base_inserted_mirrors_current_value(self):
        array = make_velocity([1.0, 2.0, 3.0, 4.0, 5.0])
        array.on_base_inserted(1.5)
        index = array.bases.index(1.5)
        assert array.values[index] == 2.0
        # already known bases are left alone
        array.on_base_inserted(1.5)
        assert array.bases.count(1.5) == 1

    def test_on_base_inserted_before_build_is_ignored(self):
        array = InterpolatedArray(Stairstep())
        array.on_base_inserted(1.0)
        assert array.bases == []

    def test_clone_is_independent(self):
        array = make_velocity()
        reported = []
        array.connect_base_addition_callback(reported.append)
        clone = array.clone()
        clone.range(2.0, 4.0).set(0.0)
        assert array.compute(3.0) == 5.0
        assert clone.compute(3.0) == 0.0
        assert reported == []


class TestChannelWindow:

    def test_window_relative_compute_and_range(self):
        array = make_velocity()
        window = ChannelWindow(array, 1.0, 3.0)
        assert window.length() == 2.0
        window.range(1.0, window.length()).set(0.0)
        assert array.compute(1.9) == 5.0
        assert array.compute(2.0) == 0.0
        assert window.compute(0.5) == 5.0
        assert window.compute(1.5) == 0.0
        # samples after the window are untouched
        assert array.compute(4.0) == 5.0
        assert array.compute(0.5) == 5.0

    def test_window_clamps(self):
        array = make_velocity([1.0, 2.0, 3.0, 4.0, 5.0])
        window = ChannelWindow(array, 1.0, 3.0)
        assert window.compute(-1.0) == 2.0
        assert window.compute(10.0) == 4.0
        assert window.array is array
