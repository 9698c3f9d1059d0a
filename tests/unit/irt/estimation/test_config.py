import pytest

from sem_analysis.irt.estimation.config import (
    DEFAULT_THETA_RANGE,
    EstimationConfig,
    default_config,
)
from sem_analysis.irt.estimation.enums import (
    EstimationMethod,
    ExtremeScorePolicy,
    SEMethod,
)


class TestEstimationConfig:
    def test_defaults(self) -> None:
        config = default_config()

        assert config.theta_range == DEFAULT_THETA_RANGE
        assert config.lower_bound == -10.0
        assert config.upper_bound == 10.0
        assert config.tolerance == 1e-6
        assert config.max_iterations == 100
        assert config.method == EstimationMethod.WLE
        assert config.se_method == SEMethod.CORRECTED
        assert config.extreme_score_policy == ExtremeScorePolicy.BOUNDARY

    def test_model_version_is_read(self) -> None:
        assert EstimationConfig().model_version != ""

    @pytest.mark.parametrize(
        ("kwargs", "message"),
        [
            ({"theta_range": (1.0, -1.0)}, "lower < upper"),
            ({"tolerance": 0.0}, "tolerance"),
            ({"max_iterations": 0}, "max_iterations"),
            ({"min_information": -1.0}, "min_information"),
            ({"n_workers": 0}, "n_workers"),
        ],
    )
    def test_invalid_values_raise(
        self, kwargs: dict[str, object], message: str
    ) -> None:
        with pytest.raises(ValueError, match=message):
            EstimationConfig(**kwargs)  # type: ignore[arg-type]

    def test_enums_parse_from_strings(self) -> None:
        assert EstimationMethod("mle") == EstimationMethod.MLE
        assert SEMethod("fisher") == SEMethod.FISHER
        assert ExtremeScorePolicy("raise") == ExtremeScorePolicy.RAISE
