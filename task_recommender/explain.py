"""Explanations for a recommendation and for the completion model."""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np
from sklearn.pipeline import Pipeline

from task_recommender.factors import required_energy
from task_recommender.schema import (
    ContextSnapshot,
    EnergyAdvice,
    EnergyMatch,
    Factor,
    ProductivityProfile,
    TimingAdvice,
    WorkItem,
)

FALLBACK_REASONING = "Well positioned for right now"

_ENERGY_RANK = {"low": 1, "medium": 2, "high": 3}


def reasoning_text(factors: Sequence[Factor]) -> str:
    """Join the descriptions of the two heaviest factors."""

    top = list(factors[:2])
    if not top:
        return FALLBACK_REASONING
    text = top[0].description
    if len(top) > 1:
        second = top[1].description
        text += f" and {second[:1].lower()}{second[1:]}"
    return text


def timing_advice(profile: ProductivityProfile, hour: int) -> TimingAdvice:
    hours = sorted(profile.optimal_hours)
    if not hours:
        return TimingAdvice(is_optimal_now=False, reasoning="Not enough history to suggest a better time")
    if hour in hours:
        return TimingAdvice(is_optimal_now=True, reasoning="You are in your most productive hours", optimal_hour=hour)

    next_hour = next((h for h in hours if h > hour), hours[0])
    return TimingAdvice(
        is_optimal_now=False,
        reasoning=f"Your next productive window starts at {next_hour}:00",
        optimal_hour=next_hour,
    )


def energy_match(item: WorkItem, context: ContextSnapshot) -> EnergyMatch:
    required = _ENERGY_RANK[required_energy(item)]
    available = _ENERGY_RANK[context.energy_level]
    if available < required:
        return "poor"
    return "good" if available == required else "excellent"


def energy_advice(item: WorkItem, context: ContextSnapshot) -> EnergyAdvice:
    match = energy_match(item, context)
    if match == "poor":
        suggestion = "Consider something less demanding or take a short break first"
    else:
        suggestion = "Good moment to work on this item"
    return EnergyAdvice(
        required=required_energy(item),
        available=context.energy_level,
        match=match,
        suggestion=suggestion,
    )


def _extract_estimator(model: Any) -> Any:
    if isinstance(model, Pipeline):
        return model.steps[-1][1]
    return model


def explain_model(model: Any, feature_names: list[str], limit: int = 10) -> dict:
    """Return the most influential features for linear/tree models."""

    estimator = _extract_estimator(model)

    if hasattr(estimator, "coef_"):
        values = np.asarray(estimator.coef_).ravel()
        kind = "coefficients"
    elif hasattr(estimator, "feature_importances_"):
        values = np.asarray(estimator.feature_importances_).ravel()
        kind = "feature_importances"
    else:
        return {"type": "unsupported", "top_features": []}

    pairs = sorted(zip(feature_names, values), key=lambda item: abs(item[1]), reverse=True)[:limit]
    return {
        "type": kind,
        "top_features": [{"feature": feature, "weight": float(weight)} for feature, weight in pairs],
    }
