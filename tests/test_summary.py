"""
Tests for summary statistics of projection results.
"""

import pytest
import numpy as np
import pandas as pd

from pymizer.core.params import mizer_params
from pymizer.core.project import project
from pymizer.core.rates import get_fmort
from pymizer.core.summary import (
    get_abundance,
    get_biomass,
    get_ssb,
    get_yield,
    get_yield_gear,
)


@pytest.fixture(scope="module")
def sim():
    species = pd.DataFrame({
        'species': ['Sprat', 'Herring', 'Cod'],
        'w_inf': [33.0, 334.0, 40000.0],
        'w_mat': [13.0, 99.0, 1606.0],
        'beta': [51076.0, 280540.0, 22.0],
        'sigma': [0.8, 3.2, 1.5],
        'r_max': [1e10, 1e10, 1e10],
        'gear': ['Industrial', 'Pelagic', 'Otter'],
    })
    params = mizer_params(species, no_w=40)
    effort = {'Industrial': 0.0, 'Pelagic': 0.5, 'Otter': 1.0}
    return project(params, effort=effort, t_max=2, dt=0.1, t_save=0.5)


class TestBiomassAndAbundance:
    """Tests for get_biomass() and get_abundance()."""

    def test_biomass_frame(self, sim):
        biomass = get_biomass(sim)
        assert isinstance(biomass, pd.DataFrame)
        assert biomass.shape == (len(sim), sim.params.no_sp)
        assert list(biomass.columns) == ['Sprat', 'Herring', 'Cod']
        assert np.allclose(biomass.index, sim.times)
        assert np.all(biomass.to_numpy() > 0)

    def test_biomass_formula(self, sim):
        params = sim.params
        expected = (sim.n[-1] * params.w * params.dw).sum(axis=1)
        assert np.allclose(get_biomass(sim).iloc[-1], expected)

    def test_size_limits(self, sim):
        total = get_biomass(sim)
        small = get_biomass(sim, max_w=1.0)
        large = get_biomass(sim, min_w=1.0)
        assert np.all(small.to_numpy() <= total.to_numpy())
        assert np.all(large.to_numpy() <= total.to_numpy())
        # Bins exactly at 1.0 would be counted twice
        overlap = get_biomass(sim, min_w=1.0, max_w=1.0)
        assert np.allclose(small + large - overlap, total)

    def test_abundance(self, sim):
        params = sim.params
        abundance = get_abundance(sim)
        expected = (sim.n[0] * params.dw).sum(axis=1)
        assert np.allclose(abundance.iloc[0], expected)


class TestSsb:
    """Tests for get_ssb()."""

    def test_ssb_below_biomass(self, sim):
        ssb = get_ssb(sim)
        biomass = get_biomass(sim)
        assert np.all(ssb.to_numpy() >= 0)
        assert np.all(ssb.to_numpy() <= biomass.to_numpy() * (1 + 1e-12))


class TestYield:
    """Tests for get_yield() and get_yield_gear()."""

    def test_unfished_gear_has_no_yield(self, sim):
        yields = get_yield_gear(sim)
        assert np.all(yields[('Industrial', 'Sprat')] == 0)
        assert np.all(yields[('Otter', 'Cod')] > 0)

    def test_yield_gear_columns(self, sim):
        yields = get_yield_gear(sim)
        assert yields.columns.names == ['gear', 'species']
        assert yields.shape == (len(sim), 9)

    def test_yield_sums_over_gears(self, sim):
        by_gear = get_yield_gear(sim)
        total = get_yield(sim)
        summed = by_gear.T.groupby(level='species').sum().T[total.columns]
        assert np.allclose(summed.to_numpy(), total.to_numpy())

    def test_yield_formula(self, sim):
        params = sim.params
        fmort = get_fmort(params, sim.effort[1])
        expected = (fmort * sim.n[1] * params.w * params.dw).sum(axis=1)
        assert np.allclose(get_yield(sim).iloc[1], expected)
