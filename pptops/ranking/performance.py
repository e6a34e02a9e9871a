"""
Performance Evaluator

Thin wrapper around rosu-pp-py that turns a beatmap's .osu content and a
score's judgement counts into a PerformanceResult.
"""

from typing import Protocol

import rosu_pp_py as rosu

from pptops.models import Mods, PerformanceResult


class EvaluationError(Exception):
    """The performance calculator rejected the beatmap or the score."""
    pass


class PerformanceEvaluator(Protocol):
    def __call__(
        self,
        content: bytes,
        mods: Mods,
        max_combo: int,
        n_misses: int,
        n300: int,
        n100: int,
        n50: int,
    ) -> PerformanceResult: ...


class RosuEvaluator:
    """Compute stable (non-lazer) pp and star rating with rosu-pp."""

    def __call__(
        self,
        content: bytes,
        mods: Mods,
        max_combo: int,
        n_misses: int,
        n300: int,
        n100: int,
        n50: int,
    ) -> PerformanceResult:
        try:
            beatmap = rosu.Beatmap(bytes=content)
            performance = rosu.Performance(
                mods=int(mods),
                lazer=False,
                combo=max_combo,
                misses=n_misses,
                n300=n300,
                n100=n100,
                n50=n50,
            )
            attributes = performance.calculate(beatmap)
        except Exception as e:
            raise EvaluationError(str(e)) from e

        return PerformanceResult(pp=attributes.pp, stars=attributes.difficulty.stars)
