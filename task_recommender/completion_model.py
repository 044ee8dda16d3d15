"""Completion-likelihood model trained on a user's work-item history."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

import numpy as np
from sklearn.linear_model import LogisticRegression
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler

from task_recommender.explain import explain_model
from task_recommender.schema import PRIORITIES, WorkItem

MIN_TRAINING_ITEMS = 10

_FEATURE_LABELS = {
    "hour_created": "the hour an item is created",
    "weekday_created": "the weekday an item is created",
    "has_due_date": "having a due date",
    "estimated_duration": "the estimated duration",
    "tag_count": "the number of tags",
}


@dataclass
class CompletionModel:
    model: Any
    feature_names: list[str]
    n_items: int

    def predict_completion(self, items: Sequence[WorkItem]) -> np.ndarray:
        X, _, _ = build_training_table(items)
        if len(X) == 0:
            return np.array([], dtype=float)
        return self.model.predict_proba(X)[:, 1]


def _row(item: WorkItem) -> list[float]:
    row = [
        float(item.created_at.hour),
        float(item.created_at.weekday()),
        1.0 if item.due_at is not None else 0.0,
        float(item.estimated_duration_min or 0.0),
        float(len(item.tags)),
    ]
    row.extend(1.0 if item.priority == priority else 0.0 for priority in PRIORITIES)
    return row


def build_training_table(items: Sequence[WorkItem]) -> tuple[np.ndarray, np.ndarray, list[str]]:
    """Build a deterministic item-level table (X, y, feature_names)."""

    feature_names = list(_FEATURE_LABELS)
    feature_names += [f"priority={priority}" for priority in PRIORITIES]
    if not items:
        return np.empty((0, len(feature_names))), np.array([], dtype=int), feature_names

    ordered = sorted(items, key=lambda item: (item.created_at, item.id))
    X = np.asarray([_row(item) for item in ordered], dtype=float)
    y = np.asarray([1 if item.status == "completed" else 0 for item in ordered], dtype=int)
    return X, y, feature_names


def fit_completion_model(items: Sequence[WorkItem], seed: int = 42) -> Optional[CompletionModel]:
    """Fit a scaled logistic regression, or None when history is too thin."""

    X, y, feature_names = build_training_table(items)
    if len(y) < MIN_TRAINING_ITEMS or len(np.unique(y)) < 2:
        return None

    model = Pipeline(
        [
            ("scaler", StandardScaler()),
            ("clf", LogisticRegression(max_iter=1000, random_state=seed)),
        ]
    )
    model.fit(X, y)
    return CompletionModel(model=model, feature_names=feature_names, n_items=len(y))


def describe_feature(feature: str) -> str:
    if feature.startswith("priority="):
        return f"{feature.split('=', 1)[1]} priority"
    return _FEATURE_LABELS.get(feature, feature)


def top_driver(completion_model: CompletionModel) -> Optional[dict]:
    """Feature with the largest absolute coefficient and its direction."""

    explanation = explain_model(completion_model.model, completion_model.feature_names, limit=1)
    if not explanation["top_features"]:
        return None
    top = explanation["top_features"][0]
    if top["weight"] == 0:
        return None
    return {
        "feature": top["feature"],
        "label": describe_feature(top["feature"]),
        "weight": top["weight"],
        "direction": "positive" if top["weight"] > 0 else "negative",
    }
