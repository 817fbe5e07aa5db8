import pytest

from py_arctraj.bases import BasisSet, crop_bases, fill_bases
from py_arctraj.interpolated_array import InterpolatedArray
from py_arctraj.interpolation import Linear, Stairstep


class TestBasisSet:

    def test_sorted_and_deduplicated(self):
        basis_set = BasisSet([2.0, 0.0, 1.0, 1.0])
        assert basis_set.to_list() == [0.0, 1.0, 2.0]
        assert len(basis_set) == 3
        assert 1.0 in basis_set
        assert 1.5 not in basis_set

    def test_insert_keeps_order_and_notifies(self):
        basis_set = BasisSet([0.0, 1.0, 2.0])
        array = InterpolatedArray(Linear())
        array.build([0.0, 1.0, 2.0], [0.0, 10.0, 20.0])
        basis_set.register_channel(array)

        assert basis_set.insert(0.5)
        assert basis_set.to_list() == [0.0, 0.5, 1.0, 2.0]
        assert array.bases == [0.0, 0.5, 1.0, 2.0]
        assert array.values[1] == pytest.approx(5.0)

        assert not basis_set.insert(0.5)
        assert basis_set.to_list() == [0.0, 0.5, 1.0, 2.0]

    def test_channel_breakpoints_reach_every_channel(self):
        basis_set = BasisSet([0.0, 1.0, 2.0])
        velocity = InterpolatedArray(Stairstep())
        heading = InterpolatedArray(Linear())
        heading.build([0.0, 1.0, 2.0], [0.0, 1.0, 2.0])
        basis_set.register_channel(velocity)
        basis_set.register_channel(heading)

        velocity.build([0.0, 1.0, 2.0], [1.0, 1.0, 0.0])

        breakpoint = 2.0 - 1e-3
        assert breakpoint in basis_set
        assert breakpoint in velocity.bases
        assert breakpoint in heading.bases
        assert heading.values[heading.bases.index(breakpoint)] == pytest.approx(breakpoint)

    def test_clone_has_no_channels(self):
        basis_set = BasisSet([0.0, 1.0])
        array = InterpolatedArray(Linear())
        array.build([0.0, 1.0], [0.0, 1.0])
        basis_set.register_channel(array)
        clone = basis_set.clone()
        clone.insert(0.5)
        assert 0.5 in clone
        assert 0.5 not in basis_set
        assert 0.5 not in array.bases


class TestCropBases:

    def test_frames_interior_bases(self):
        assert crop_bases([0.0, 1.0, 2.0, 3.0], 0.5, 2.5) == [0.5, 1.0, 2.0, 2.5]

    def test_ends_on_bases(self):
        assert crop_bases([0.0, 1.0, 2.0, 3.0], 1.0, 2.0) == [1.0, 2.0]

    def test_empty_window(self):
        assert crop_bases([0.0, 1.0, 2.0], 1.5, 1.5) == [1.5]


class TestFillBases:

    def test_enough_points_unchanged(self):
        assert fill_bases([0.0, 1.0, 2.0, 3.0], 4) == [0.0, 1.0, 2.0, 3.0]

    def test_single_gap(self):
        assert fill_bases([0.0, 3.0], 4) == pytest.approx([0.0, 1.0, 2.0, 3.0])

    def test_remainder_goes_to_first_gaps(self):
        # 3 points to add over 2 gaps: 2 in the first, 1 in the second
        assert fill_bases([0.0, 3.0, 5.0], 6) == pytest.approx([0.0, 1.0, 2.0, 3.0, 4.0, 5.0])

    def test_degenerate_input(self):
        assert fill_bases([], 4) == []
        assert fill_bases([1.0], 4) == [1.0]
