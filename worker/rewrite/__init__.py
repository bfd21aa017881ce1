"""Iterative score -> rewrite -> rescore optimization."""

from worker.rewrite.controller import (
    BestSoFar,
    RewriteConfig,
    RewriteController,
    RewriteIteration,
    RewritePhase,
    RewriteSession,
    fold_best,
)
from worker.rewrite.directive import RewriteDirective, build_directive, weak_dimensions

__all__ = [
    "BestSoFar",
    "RewriteConfig",
    "RewriteController",
    "RewriteDirective",
    "RewriteIteration",
    "RewritePhase",
    "RewriteSession",
    "build_directive",
    "fold_best",
    "weak_dimensions",
]
