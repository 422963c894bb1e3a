"""
Tests for effort schedules.

Covers the three ways of giving effort (scalar, per-gear vector,
time x gear DataFrame), their validation, and the save-point contract.
"""

import pytest
import numpy as np
import pandas as pd

from pymizer.core.effort import EffortSchedule, regularize_effort
from pymizer.core.exceptions import ConfigurationError

GEARS = ['Industrial', 'Pelagic', 'Beam', 'Otter']


class TestConstantEffort:
    """Tests for scalar effort."""

    def test_grid_and_values(self):
        schedule = EffortSchedule.constant(GEARS, 0.5, t_max=10, dt=1)
        assert np.allclose(schedule.times, np.arange(11))
        assert schedule.effort.shape == (11, 4)
        assert np.all(schedule.effort == 0.5)
        assert schedule.gear_names == GEARS

    def test_fractional_dt_includes_t_max(self):
        schedule = EffortSchedule.constant(GEARS, 1.0, t_max=1.0, dt=0.1)
        assert schedule.n_times == 11
        assert np.isclose(schedule.times[-1], 1.0)
        assert schedule.n_steps == 10

    def test_no_cumulative_rounding(self):
        schedule = EffortSchedule.constant(['A'], 1.0, t_max=100, dt=0.1)
        assert schedule.n_times == 1001
        assert np.allclose(schedule.times, np.arange(1001) * 0.1)

    def test_non_numeric(self):
        with pytest.raises(ConfigurationError):
            EffortSchedule.constant(GEARS, 'lots')

    def test_invalid_dt(self):
        with pytest.raises(ConfigurationError, match="dt"):
            EffortSchedule.constant(GEARS, 1.0, t_max=10, dt=0)


class TestVectorEffort:
    """Tests for per-gear constant effort."""

    def test_named_vector_is_reordered(self):
        effort = {'Otter': 0.5, 'Beam': 0.5, 'Pelagic': 1.0, 'Industrial': 0.0}
        schedule = EffortSchedule.from_vector(GEARS, effort, t_max=5, dt=1)
        assert np.array_equal(schedule.effort[0], [0.0, 1.0, 0.5, 0.5])
        assert np.all(schedule.effort == schedule.effort[0])

    def test_series_input(self):
        effort = pd.Series({'Pelagic': 2.0, 'Otter': 1.0, 'Beam': 0.0, 'Industrial': 3.0})
        schedule = EffortSchedule.from_vector(GEARS, effort, t_max=2, dt=1)
        assert np.array_equal(schedule.effort[-1], [3.0, 2.0, 0.0, 1.0])

    def test_extra_names_ignored(self):
        effort = {'Otter': 1.0, 'Beam': 2.0, 'Pelagic': 3.0, 'Industrial': 4.0, 'Trawl': 9.0}
        schedule = EffortSchedule.from_vector(GEARS, effort, t_max=1, dt=1)
        assert np.array_equal(schedule.effort[0], [4.0, 3.0, 2.0, 1.0])

    def test_missing_gear_name(self):
        effort = {'Otter': 1.0, 'Beam': 2.0, 'Pelagic': 3.0, 'Shrimp': 4.0}
        with pytest.raises(ConfigurationError, match="Industrial"):
            EffortSchedule.from_vector(GEARS, effort)

    def test_unnamed_vector_positional(self):
        schedule = EffortSchedule.from_vector(GEARS, [1.0, 2.0, 3.0, 4.0], t_max=1, dt=1)
        assert np.array_equal(schedule.effort[0], [1.0, 2.0, 3.0, 4.0])

    def test_unlabelled_series_positional(self):
        schedule = EffortSchedule.from_vector(GEARS, pd.Series([1.0, 2.0, 3.0, 4.0]), t_max=1, dt=1)
        assert np.array_equal(schedule.effort[0], [1.0, 2.0, 3.0, 4.0])

    def test_unlabelled_series_wrong_length(self):
        with pytest.raises(ConfigurationError, match="same length"):
            EffortSchedule.from_vector(GEARS, pd.Series([1.0, 2.0]))

    def test_unnamed_vector_wrong_length(self):
        with pytest.raises(ConfigurationError, match="same length"):
            EffortSchedule.from_vector(GEARS, [1.0, 2.0, 3.0])

    def test_non_finite(self):
        with pytest.raises(ConfigurationError, match="finite"):
            EffortSchedule.from_vector(GEARS, [1.0, np.nan, 3.0, 4.0])


class TestArrayEffort:
    """Tests for time-varying effort."""

    def test_identity_on_dt_grid(self):
        """A table already on the dt grid comes back unchanged."""
        table = pd.DataFrame(
            np.arange(12, dtype=float).reshape(6, 2),
            index=[0.0, 0.5, 1.0, 1.5, 2.0, 2.5],
            columns=['A', 'B'],
        )
        schedule = EffortSchedule.from_array(['A', 'B'], table, dt=0.5)
        assert np.allclose(schedule.times, table.index)
        assert np.array_equal(schedule.effort, table.to_numpy())

    def test_step_function_between_times(self):
        table = pd.DataFrame({'A': [1.0, 2.0, 3.0]}, index=[0, 2, 5])
        schedule = EffortSchedule.from_array(['A'], table, dt=1)
        assert np.allclose(schedule.times, np.arange(6))
        assert np.array_equal(schedule.effort[:, 0], [1.0, 1.0, 2.0, 2.0, 2.0, 3.0])

    def test_fine_dt_forward_fill(self):
        table = pd.DataFrame({'A': [1.0, 0.0]}, index=[2000, 2001])
        schedule = EffortSchedule.from_array(['A'], table, dt=0.1)
        assert schedule.n_times == 11
        assert np.isclose(schedule.times[0], 2000)
        assert np.isclose(schedule.times[-1], 2001)
        assert np.all(schedule.effort[:10, 0] == 1.0)
        assert schedule.effort[10, 0] == 0.0

    def test_columns_reordered_and_extra_dropped(self):
        table = pd.DataFrame(
            {'Otter': [1.0, 1.0], 'Extra': [9.0, 9.0], 'Industrial': [2.0, 2.0],
             'Beam': [3.0, 3.0], 'Pelagic': [4.0, 4.0]},
            index=[0, 1],
        )
        schedule = EffortSchedule.from_array(GEARS, table, dt=1)
        assert np.array_equal(schedule.effort[0], [2.0, 4.0, 3.0, 1.0])

    def test_missing_gear(self):
        table = pd.DataFrame({'Industrial': [1.0], 'Pelagic': [1.0]}, index=[0])
        with pytest.raises(ConfigurationError, match="do not match"):
            EffortSchedule.from_array(GEARS, table, dt=1)

    def test_non_numeric_time(self):
        table = pd.DataFrame({'A': [1.0, 2.0]}, index=['start', 'end'])
        with pytest.raises(ConfigurationError, match="numeric"):
            EffortSchedule.from_array(['A'], table, dt=1)

    def test_datetime_index_rejected(self):
        table = pd.DataFrame(
            {'A': [1.0, 2.0]},
            index=pd.to_datetime(['2000-01-01', '2000-01-02']),
        )
        with pytest.raises(ConfigurationError, match="numeric"):
            EffortSchedule.from_array(['A'], table, dt=0.1)

    def test_timedelta_index_rejected(self):
        table = pd.DataFrame({'A': [1.0, 2.0]}, index=pd.to_timedelta([0, 1], unit='D'))
        with pytest.raises(ConfigurationError, match="numeric"):
            regularize_effort(['A'], table, dt=0.1)

    def test_decreasing_time(self):
        table = pd.DataFrame({'A': [1.0, 2.0, 3.0]}, index=[0, 5, 3])
        with pytest.raises(ConfigurationError, match="increasing"):
            EffortSchedule.from_array(['A'], table, dt=1)

    def test_numeric_strings_accepted(self):
        table = pd.DataFrame({'A': [1.0, 2.0]}, index=['1', '3'])
        schedule = EffortSchedule.from_array(['A'], table, dt=1)
        assert np.allclose(schedule.times, [1, 2, 3])

    def test_to_frame(self):
        table = pd.DataFrame({'A': [1.0, 2.0]}, index=[0, 1])
        frame = EffortSchedule.from_array(['A'], table, dt=0.5).to_frame()
        assert frame.index.name == 'time'
        assert list(frame.columns) == ['A']
        assert len(frame) == 3


class TestSaveIndices:
    """Tests for the t_save contract."""

    def test_every_other_step(self):
        schedule = EffortSchedule.constant(['A'], 0.0, t_max=10, dt=1)
        idx = schedule.save_indices(2)
        assert np.array_equal(idx, [0, 2, 4, 6, 8, 10])
        assert np.allclose(schedule.times[idx], [0, 2, 4, 6, 8, 10])

    def test_multiple_with_rounding_error(self):
        schedule = EffortSchedule.constant(['A'], 0.0, t_max=1.2, dt=0.1)
        idx = schedule.save_indices(0.3)
        assert np.array_equal(idx, [0, 3, 6, 9, 12])

    @pytest.mark.parametrize("t_save", [0.25, 0.05, 0.0, -1.0, 0.15])
    def test_not_a_multiple(self, t_save):
        schedule = EffortSchedule.constant(['A'], 0.0, t_max=10, dt=0.1)
        with pytest.raises(ConfigurationError, match="multiple of dt"):
            schedule.save_indices(t_save)

    def test_save_every_step(self):
        schedule = EffortSchedule.constant(['A'], 0.0, t_max=1, dt=0.1)
        assert len(schedule.save_indices(0.1)) == schedule.n_times


class TestRegularizeEffort:
    """Tests for the dispatch in regularize_effort()."""

    def test_scalar(self):
        schedule = regularize_effort(GEARS, 0.3, t_max=2, dt=1)
        assert np.all(schedule.effort == 0.3)
        assert schedule.effort.shape == (3, 4)

    def test_numpy_scalar(self):
        schedule = regularize_effort(['A'], np.float64(2.0), t_max=1, dt=1)
        assert np.all(schedule.effort == 2.0)

    def test_single_element_list_broadcast(self):
        schedule = regularize_effort(GEARS, [0.7], t_max=1, dt=1)
        assert np.all(schedule.effort == 0.7)

    def test_dict(self):
        effort = dict(zip(GEARS, [1.0, 2.0, 3.0, 4.0]))
        schedule = regularize_effort(GEARS, effort, t_max=1, dt=1)
        assert np.array_equal(schedule.effort[0], [1.0, 2.0, 3.0, 4.0])

    def test_dataframe_ignores_t_max(self):
        table = pd.DataFrame({'A': [1.0, 1.0]}, index=[0, 3])
        schedule = regularize_effort(['A'], table, t_max=100, dt=1)
        assert np.isclose(schedule.times[-1], 3)

    def test_bare_2d_array_rejected(self):
        with pytest.raises(ConfigurationError, match="time index"):
            regularize_effort(['A', 'B'], np.ones((3, 2)), dt=1)

    def test_unnamed_vector_length_mismatch(self):
        with pytest.raises(ConfigurationError):
            regularize_effort(['A', 'B'], np.array([1.0, 2.0, 3.0]))
