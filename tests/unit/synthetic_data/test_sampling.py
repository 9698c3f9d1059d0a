import numpy as np
import pytest
from scipy import stats

from sem_analysis.core.utils import get_rng
from sem_analysis.synthetic_data.sampling import (
    PointMass,
    SamplerRegistry,
    ScipyDistribution,
    draw_sample,
    registry,
)


class TestScipyDistribution:
    def test_sample_returns_correct_shape(self) -> None:
        dist = ScipyDistribution(stats.norm(loc=0, scale=1))
        rng = get_rng(42)
        samples = dist.sample(100, rng)

        assert samples.shape == (100,)
        assert samples.dtype == np.float64

    def test_sample_reproducible_with_same_seed(self) -> None:
        dist = ScipyDistribution(stats.norm(loc=0, scale=1))

        samples1 = dist.sample(50, get_rng(123))
        samples2 = dist.sample(50, get_rng(123))

        np.testing.assert_array_equal(samples1, samples2)

    def test_cdf_returns_valid_probability(self) -> None:
        dist = ScipyDistribution(stats.norm(loc=0, scale=1))

        assert dist.cdf(0.0) == pytest.approx(0.5)
        assert dist.cdf(-10.0) == pytest.approx(0.0, abs=1e-6)
        assert dist.cdf(10.0) == pytest.approx(1.0, abs=1e-6)

    def test_mean(self) -> None:
        dist = ScipyDistribution(stats.norm(loc=0.57, scale=1.5))

        assert dist.mean == pytest.approx(0.57)


class TestPointMass:
    def test_sample_is_constant(self) -> None:
        samples = PointMass(value=-0.5).sample(20, get_rng(0))

        np.testing.assert_array_equal(samples, np.full(20, -0.5))
        assert samples.dtype == np.float64

    def test_cdf_is_step(self) -> None:
        dist = PointMass(value=1.0)

        assert dist.cdf(0.999) == 0.0
        assert dist.cdf(1.0) == 1.0
        assert dist.cdf(3.0) == 1.0


class TestSamplerRegistry:
    def test_register_and_retrieve(self) -> None:
        test_registry = SamplerRegistry()

        def make_test_dist(*, loc: float = 0.0) -> ScipyDistribution:
            return ScipyDistribution(stats.norm(loc=loc, scale=1))

        test_registry.register("test_dist")(make_test_dist)
        dist = test_registry.get_sampler("test_dist", {"loc": 5.0})

        assert isinstance(dist, ScipyDistribution)
        assert dist.cdf(5.0) == pytest.approx(0.5)
        assert test_registry.names == ["test_dist"]

    def test_get_unknown_sampler_raises(self) -> None:
        test_registry = SamplerRegistry()

        with pytest.raises(ValueError, match="not registered"):
            test_registry.get_sampler("unknown", {})

    def test_unexpected_parameter_raises(self) -> None:
        with pytest.raises(ValueError, match="Invalid parameters"):
            registry.get_sampler("normal", {"location": 1.0})

    def test_builtin_names(self) -> None:
        assert registry.names == [
            "fixed",
            "normal",
            "skew_normal",
            "truncated_normal",
            "uniform",
        ]


class TestDrawSample:
    def test_returns_correct_shape(self) -> None:
        samples = draw_sample(100, "normal", {}, get_rng(42))

        assert samples.shape == (100,)
        assert samples.dtype == np.float64

    def test_reproducible_with_same_seed(self) -> None:
        samples1 = draw_sample(50, "normal", {}, get_rng(123))
        samples2 = draw_sample(50, "normal", {}, get_rng(123))

        np.testing.assert_array_equal(samples1, samples2)

    def test_respects_distribution_params(self) -> None:
        samples = draw_sample(
            1000,
            "normal",
            {"mean": 100.0, "std": 0.1},
            get_rng(42),
        )

        assert np.mean(samples) == pytest.approx(100.0, abs=0.1)
        assert np.std(samples) == pytest.approx(0.1, abs=0.05)

    def test_unknown_distribution_raises(self) -> None:
        with pytest.raises(ValueError, match="not registered"):
            draw_sample(10, "nonexistent", {}, get_rng(42))


class TestRegisteredDistributions:
    """Smoke tests that all registered distributions work correctly."""

    def test_fixed(self) -> None:
        dist = registry.get_sampler("fixed", {"value": 0.25})
        samples = dist.sample(100, get_rng(42))

        assert np.all(samples == 0.25)

    def test_normal(self) -> None:
        dist = registry.get_sampler("normal", {"mean": 0.0, "std": 1.0})
        samples = dist.sample(100, get_rng(42))

        assert samples.shape == (100,)

    def test_normal_nonpositive_std_raises(self) -> None:
        with pytest.raises(ValueError, match="std must be > 0"):
            registry.get_sampler("normal", {"mean": 0.0, "std": 0.0})

    def test_skew_normal(self) -> None:
        dist = registry.get_sampler(
            "skew_normal", {"a": 5.0, "loc": 0.0, "scale": 1.0}
        )
        samples = dist.sample(100, get_rng(42))

        assert samples.shape == (100,)

    def test_uniform(self) -> None:
        dist = registry.get_sampler("uniform", {"low": 0.0, "high": 1.0})
        samples = dist.sample(100, get_rng(42))

        assert samples.shape == (100,)
        assert samples.min() >= 0.0
        assert samples.max() <= 1.0

    def test_uniform_empty_interval_raises(self) -> None:
        with pytest.raises(ValueError, match="high must exceed low"):
            registry.get_sampler("uniform", {"low": 1.0, "high": 1.0})

    def test_truncated_normal(self) -> None:
        dist = registry.get_sampler(
            "truncated_normal",
            {"mean": 0.0, "std": 1.0, "lower": -2.0, "upper": 2.0},
        )
        samples = dist.sample(100, get_rng(42))

        assert samples.shape == (100,)
        assert samples.min() >= -2.0
        assert samples.max() <= 2.0

    def test_truncated_normal_one_sided(self) -> None:
        dist = registry.get_sampler(
            "truncated_normal",
            {"mean": 0.0, "std": 1.0, "lower": 0.0, "upper": None},
        )
        samples = dist.sample(200, get_rng(42))

        assert samples.min() >= 0.0
