"""
Optuna tuning of an LWR model through its flat parameter vector.

The optimizer only sees the entries selected by the parameter vector mask
(here: offsets and slopes); centers and widths stay fixed, so the activation
cache is reused across trials.

Usage:
    python examples/optuna_tuning.py
"""

import numpy as np
import optuna

from lwr import ModelParametersLWR


def lwr_objective(trial: optuna.Trial, model, mask, X, y):
    """Optuna objective: MSE of the model with trial values in the masked entries."""
    values = model.get_parameter_vector_all()
    for i in np.flatnonzero(mask):
        values[i] = trial.suggest_float(f"p{i}", -3.0, 3.0)
    model.set_parameter_vector_all(values)

    y_pred = model.locally_weighted_lines(X)[:, 0]
    return np.mean((y - y_pred) ** 2)


if __name__ == "__main__":
    # Generate synthetic data
    rng = np.random.RandomState(42)
    X = np.linspace(-3, 3, 200).reshape(-1, 1)
    y = np.sin(X[:, 0]) + rng.normal(0, 0.05, 200)

    n_basis = 5
    centers = np.linspace(-3, 3, n_basis).reshape(-1, 1)
    widths = np.full((n_basis, 1), 0.75)
    model = ModelParametersLWR(
        centers, widths,
        slopes=np.zeros((n_basis, 1)),
        offsets=np.zeros((n_basis, 1)),
        lines_pivot_at_max_activation=True,
    )
    mask = model.get_parameter_vector_mask({"offsets", "slopes"})

    optuna.logging.set_verbosity(optuna.logging.WARNING)
    study = optuna.create_study(direction="minimize")
    study.optimize(lambda trial: lwr_objective(trial, model, mask, X, y), n_trials=200)

    print(f"\nBest MSE: {study.best_value:.4f}")

    # Apply best params
    values = model.get_parameter_vector_all()
    for i in np.flatnonzero(mask):
        values[i] = study.best_params[f"p{i}"]
    model.set_parameter_vector_all(values)

    print(model.parameter_summary())
    print(f"Cache hits: {model.cache.n_hits}, misses: {model.cache.n_misses}")
