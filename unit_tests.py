import unittest
from unittest import TestCase, main
import math
import logging
import numpy as np

import ddmfpt as fpt
from ddmfpt import series, moments, vectors, analytic

import paranoid
paranoid.settings.Settings.set(enabled=True)

def fails(f, exception=BaseException):
    failed = False
    try:
        f()
    except exception as e:
        failed = True
    if failed == False:
        raise ValueError("Error, function did not fail")

class TestSeries(TestCase):
    def setUp(self):
        self.tol = 1e-29
        self.times = [.001, .01, .05, .1, .2, .5, 1, 2, 5]
    def test_zero_time(self):
        """Both series are singular at t=0, so the density is defined as 0"""
        assert series.fpt_asym_fast(0, .3, self.tol) == 0
        assert series.fpt_sym_fast(0, self.tol) == 0
    def test_crossover(self):
        """Short series for short times, long series for long times"""
        assert series.use_short_series(.001, self.tol)
        assert not series.use_short_series(10, self.tol)
        # Undefined cost estimates fall back to the long series
        assert not series.use_short_series(1e3, .4)
    def test_short_long_agree(self):
        """Either series can be used anywhere, given enough terms"""
        for w in [.1, .3, .7]:
            for t in [.05, .1, .2, .3]:
                s = series.fpt_asym_short(t, w, 1e-14)
                l = series.fpt_asym_long(t, w, 1e-14)
                assert abs(s - l) < 1e-8 * max(1, abs(s)), (t, w, s, l)
    def test_short_matches_image_sum(self):
        """Starting points above 1/2 still reach the requested accuracy"""
        for w in [.3, .55, .7, .9, 1]:
            for t in [.005, .02, .05, .1, .2]:
                b = t**-1.5 / math.sqrt(2 * math.pi)
                ref = b * math.fsum((w + 2*k) * math.exp(-(w + 2*k)**2 / (2*t)) for k in range(-30, 31))
                assert series.use_short_series(t, self.tol)
                f = series.fpt_asym_fast(t, w, self.tol)
                assert abs(f - ref) < 1e-12 * max(1, abs(ref)), (t, w, f, ref)
                assert abs(series.fpt_asym_short(t, w, self.tol) - ref) < 1e-12 * max(1, abs(ref))
    def test_symmetric_matches_asymmetric(self):
        """The symmetric series is the asymmetric one at w = 1/2"""
        for t in self.times:
            sym = series.fpt_sym_fast(t, self.tol)
            asym = series.fpt_asym_short(t, .5, self.tol)
            assert abs(sym - asym) < 1e-10 * max(1, abs(sym)), (t, sym, asym)
    def test_sym_series_regimes(self):
        """Short and long parameterizations of the symmetric series agree"""
        for t in [.05, .1, .2, .4]:
            short = series.fpt_sym_series(t, 1 / (8 * t), 1 / math.sqrt(8 * math.pi * t**3), 1e-14)
            long = series.fpt_sym_series(t, t * math.pi**2 / 2, math.pi, 1e-14)
            assert abs(short - long) < 1e-8, (t, short, long)
    def test_density_integrates(self):
        """Lower density integrated over time gives the hitting probability 1-w"""
        dt = .001
        ts = np.arange(1, 10001) * dt
        for w in [.2, .5, .7]:
            total = np.sum([series.fpt_asym_fast(t, w, self.tol) for t in ts]) * dt
            assert abs(total - (1 - w)) < 1e-3, (w, total)
    def test_nonnegative(self):
        for t in self.times:
            for w in [0, .25, .5, 1]:
                assert series.fpt_asym_fast(t, w, self.tol) >= -1e-12

class TestMoments(TestCase):
    def setUp(self):
        self.dt = .01
        self.mu = np.linspace(-1, 2, 50)
        self.sig2 = np.linspace(.5, 1.5, 50)
    def test_plain(self):
        """Without leak the moments are running sums"""
        m = moments.accumulate_moments(self.mu, self.sig2, self.dt)
        assert not m.leaky
        assert len(m) == 50
        assert m.cum_mu[0] == self.dt * self.mu[0]
        assert m.cum_sig2[0] == self.dt * self.sig2[0]
        assert np.allclose(m.cum_mu, np.cumsum(self.mu) * self.dt)
        assert np.allclose(m.cum_sig2, np.cumsum(self.sig2) * self.dt)
    def test_leaky(self):
        """With leak the previous value decays at each step"""
        inv_leak = 3.
        m = moments.accumulate_moments(self.mu, self.sig2, self.dt, inv_leak=inv_leak)
        assert m.leaky
        e = np.exp(-self.dt * inv_leak)
        cum_mu = self.dt * self.mu[0]
        cum_sig2 = self.dt * self.sig2[0]
        assert math.isclose(m.cum_mu[0], cum_mu)
        for k in range(1, 50):
            cum_mu = e * cum_mu + self.dt * self.mu[k]
            cum_sig2 = e * e * cum_sig2 + self.dt * self.sig2[k]
            assert math.isclose(m.cum_mu[k], cum_mu, rel_tol=1e-10, abs_tol=1e-12)
            assert math.isclose(m.cum_sig2[k], cum_sig2, rel_tol=1e-10)
    def test_discount_tables(self):
        """Both halves of the double discount table match the direct computation"""
        for k_max in [1, 2, 3, 10, 11]:
            disc, disc2 = moments.discount_tables(1.5, self.dt, k_max)
            steps = np.arange(1, k_max+1)
            assert np.allclose(disc, np.exp(-1.5 * self.dt * steps), rtol=1e-12)
            assert np.allclose(disc2, np.exp(-2 * 1.5 * self.dt * steps), rtol=1e-12)
    def test_no_leak_discount(self):
        disc, disc2 = moments.discount_tables(0, self.dt, 20)
        assert np.all(disc == 1) and np.all(disc2 == 1)
    def test_negative_leak(self):
        fails(lambda : moments.accumulate_moments(self.mu, self.sig2, self.dt, inv_leak=-1))

class TestMassNormalize(TestCase):
    def setUp(self):
        self.dt = .01
        rng = np.random.RandomState(0)
        self.pairs = [(rng.rand(100), rng.rand(100) * .3),
                      (np.linspace(0, 1, 50), np.linspace(1, 0, 50)),
                      (rng.rand(30) - .2, rng.rand(30) - .4)]
    def test_normalization(self):
        for g1, g2 in self.pairs:
            g1, g2 = g1.copy(), g2.copy()
            fpt.mass_normalize(g1, g2, self.dt)
            assert abs((np.sum(g1) + np.sum(g2)) * self.dt - 1) < 1e-9
    def test_ratio_preserved(self):
        for g1, g2 in self.pairs:
            p = np.sum(np.maximum(g1, 0)) / (np.sum(np.maximum(g1, 0)) + np.sum(np.maximum(g2, 0)))
            g1, g2 = g1.copy(), g2.copy()
            fpt.mass_normalize(g1, g2, self.dt)
            assert abs(np.sum(g1) / (np.sum(g1) + np.sum(g2)) - p) < 1e-9
    def test_only_last_element_adjusted(self):
        g1 = np.asarray([1., -2., 3., 4.])
        g2 = np.asarray([-1., 2., 2., 1.])
        fpt.mass_normalize(g1, g2, .01)
        assert np.all(g1[:3] == [1, 0, 3])
        assert np.all(g2[:3] == [0, 2, 2])
        p = 8 / 13
        assert math.isclose(g1[3], 4 + p / .01 - 8)
        assert math.isclose(g2[3], 1 + (1 - p) / .01 - 5)
    def test_in_place(self):
        g1 = np.ones(10)
        g2 = np.ones(10)
        r1, r2 = fpt.mass_normalize(g1, g2, .1)
        assert r1 is g1 and r2 is g2
        assert math.isclose(g1[-1], 1 + .5 / .1 - 10)
    def test_partial(self):
        """Only the first n elements are used"""
        g1 = np.ones(10)
        g2 = np.ones(10)
        fpt.mass_normalize(g1, g2, .1, n=5)
        assert np.all(g1[5:] == 1)
        assert math.isclose((np.sum(g1[:5]) + np.sum(g2[:5])) * .1, 1)
    def test_zero_mass(self):
        fails(lambda : fpt.mass_normalize(np.zeros(10), np.zeros(10), .1))
    def test_warning(self):
        """Large renormalizations are reported"""
        with self.assertLogs("ddmfpt", level="WARNING"):
            fpt.mass_normalize(np.ones(10), np.ones(10), .01)

class TestVectors(TestCase):
    def test_extend_fill(self):
        v = fpt.extend_vector(np.asarray([1.0, 2.0]), 4, 0.0)
        assert list(v) == [1.0, 2.0, 0.0, 0.0]
    def test_extend_same_length(self):
        """Extending to the same length gives an identical copy"""
        v = np.linspace(0, 1, 17)
        e = fpt.extend_vector(v, 17)
        assert np.all(e == v)
        assert e is not v
        e[0] = 5
        assert v[0] == 0
    def test_extend_truncate_roundtrip(self):
        v = np.linspace(-3, 3, 11)
        e = fpt.extend_vector(v, 30, 7.5)
        assert np.all(e[11:] == 7.5)
        assert np.all(fpt.extend_vector(e, 11) == v)
    def test_extend_v_size(self):
        v = np.asarray([1., 2., 3., 4.])
        assert list(fpt.extend_vector(v, 5, -1., v_size=2)) == [1, 2, -1, -1, -1]
        fails(lambda : fpt.extend_vector(v, 5, v_size=6))
    def test_bound_derivative(self):
        b = np.asarray([1., .9, .7, .4])
        d = fpt.bound_derivative(b, .1)
        assert np.allclose(d, [-1, -2, -3, -3])
        assert list(fpt.bound_derivative(np.asarray([2.]), .1)) == [0]
    def test_t_domain(self):
        assert np.allclose(fpt.t_domain(.1, 3), [.1, .2, .3])
    def test_allocation_error(self):
        """Running out of memory is reported as an AllocationError"""
        assert issubclass(fpt.AllocationError, MemoryError)
        def run_out():
            with vectors.scratch_storage("a test"):
                raise MemoryError()
        with self.assertRaises(fpt.AllocationError):
            run_out()
    def test_output_vector(self):
        g = np.zeros(5)
        assert vectors.output_vector(g, 5, "g") is g
        assert len(vectors.output_vector(None, 5, "g")) == 5
        fails(lambda : vectors.output_vector(np.zeros(4), 5, "g"), ValueError)
        fails(lambda : vectors.output_vector(np.zeros(5, dtype=int), 5, "g"), ValueError)
    def test_check_grid(self):
        assert vectors.check_grid(.1, 5.0) == 5
        fails(lambda : vectors.check_grid(0, 5), ValueError)
        fails(lambda : vectors.check_grid(.1, 0), ValueError)
        fails(lambda : vectors.check_grid(.1, 2.5), ValueError)
    def test_as_sequence(self):
        a = vectors.as_sequence([1, 2, 3, 4], 3, "a")
        assert a.dtype == np.dtype('float64') and list(a) == [1, 2, 3]
        fails(lambda : vectors.as_sequence([1, 2], 3, "a"), ValueError)
        fails(lambda : vectors.as_sequence(np.ones((3, 3)), 3, "a"), ValueError)

class TestConstantSolvers(TestCase):
    def test_const_lower_ratio(self):
        """The lower density is a fixed multiple of the upper one"""
        g1, g2 = fpt.ddm_fpt_const(.7, 1.2, .005, 100)
        assert np.allclose(g2, g1 * np.exp(-2 * .7 * 1.2), rtol=1e-12, atol=0)
    def test_const_total_mass(self):
        """Over a long horizon nearly all mass is absorbed"""
        dt = .002
        g1, g2 = fpt.ddm_fpt_const(1., 1., dt, 5000)
        assert abs((np.sum(g1) + np.sum(g2)) * dt - 1) < 1e-3
        # Probability of the upper bound for drift mu, bounds +/-b
        p_up = 1 / (1 + np.exp(-2 * 1. * 1.))
        assert abs(np.sum(g1) * dt - p_up) < 1e-3
    def test_const_asym_symmetric_case(self):
        """Asymmetric series with symmetric bounds agree with the symmetric series"""
        g1, g2 = fpt.ddm_fpt_const(.5, 1., .01, 100)
        c1 = 4.
        w = .5
        a1 = np.asarray([analytic.fpt_asym_up((i+1)*.01, c1, .125, .5, w) for i in range(100)])
        a2 = np.asarray([analytic.fpt_asym_lo((i+1)*.01, c1, .125, -.5, w) for i in range(100)])
        assert np.allclose(g1, a1, atol=1e-10)
        assert np.allclose(g2, a2, atol=1e-10)
    def test_const_asym_mass(self):
        dt = .002
        bu, bl, mu = 1.5, -.5, -.3
        g1, g2 = fpt.ddm_fpt_const_asym(mu, bu, bl, dt, 8000)
        assert np.all(g1 >= 0) and np.all(g2 >= 0)
        # Probability of the upper bound for a process starting at 0
        p_up = (1 - np.exp(2 * mu * -bl)) / (np.exp(-2 * mu * bu) - np.exp(2 * mu * -bl))
        assert abs(np.sum(g1) * dt - p_up) < 2e-3
        assert abs((np.sum(g1) + np.sum(g2)) * dt - 1) < 2e-3
    def test_const_invalid(self):
        fails(lambda : fpt.ddm_fpt_const(0, 1, .01, 10))
        fails(lambda : fpt.ddm_fpt_const(1, -1, .01, 10))
        fails(lambda : fpt.ddm_fpt_const(1, 1, 0, 10))
        fails(lambda : fpt.ddm_fpt_const_asym(1, 1, .5, .01, 10))

class TestLogger(TestCase):
    def test_set_log_level(self):
        fpt.set_log_level(logging.DEBUG)
        with self.assertLogs("ddmfpt", level="DEBUG") as logs:
            fpt.ddm_fpt_const(1., 1., .01, 5)
        assert any("Series solution" in l for l in logs.output)
        fpt.set_log_level(logging.INFO)

if __name__ == '__main__':
    main()
