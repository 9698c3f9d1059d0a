"""
Trait estimation for the Partial Credit Model.

This module provides the estimation engine: item parameters, the
likelihood/information engine, Warm's weighted likelihood (and plain
maximum likelihood) point estimation, standard errors, and batch scoring.

Key components:
- ItemSet / PCMItemParameters: Calibrated item thresholds
- EstimationConfig: Configuration for estimation
- estimate_theta: Point estimate for one response pattern
- estimate_se: Standard error at an estimate
- estimate_abilities: Parallel batch scoring with partial-failure semantics
"""

from sem_analysis.irt.estimation.abilities import (
    estimate_abilities,
    estimate_trait,
    estimate_trait_batch,
)
from sem_analysis.irt.estimation.config import EstimationConfig
from sem_analysis.irt.estimation.data_models import (
    AbilityEstimates,
    TraitEstimate,
)
from sem_analysis.irt.estimation.enums import (
    EstimateStatus,
    EstimationMethod,
    ExtremeScorePolicy,
    SEMethod,
)
from sem_analysis.irt.estimation.likelihood import (
    LikelihoodTerms,
    bias_correction,
    evaluate,
    information,
    log_likelihood,
    score,
    total_information,
)
from sem_analysis.irt.estimation.parameters import (
    ItemSet,
    PCMItemParameters,
    load_items,
)
from sem_analysis.irt.estimation.standard_error import (
    UNDEFINED_SE,
    estimate_se,
)
from sem_analysis.irt.estimation.theta import (
    ExtremeScore,
    ThetaSolution,
    estimate_theta,
    extreme_score,
)

__all__ = [
    "AbilityEstimates",
    "EstimateStatus",
    "EstimationConfig",
    "EstimationMethod",
    "ExtremeScore",
    "ExtremeScorePolicy",
    "ItemSet",
    "LikelihoodTerms",
    "PCMItemParameters",
    "SEMethod",
    "ThetaSolution",
    "TraitEstimate",
    "UNDEFINED_SE",
    "bias_correction",
    "estimate_abilities",
    "estimate_se",
    "estimate_theta",
    "estimate_trait",
    "estimate_trait_batch",
    "evaluate",
    "extreme_score",
    "information",
    "load_items",
    "log_likelihood",
    "score",
    "total_information",
]
