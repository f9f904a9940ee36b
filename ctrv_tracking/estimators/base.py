"""
Base class for state estimators.

This module defines the common interface of the recursive estimators in this
package.
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple

import numpy as np


class StateEstimator(ABC):
    """Abstract base class for recursive state estimators."""

    def __init__(self, state_dim: int):
        """
        Initialize state estimator.

        Args:
            state_dim: Dimension of the state vector.
        """
        self.state_dim = state_dim
        self.state: Optional[np.ndarray] = None
        self.covariance: Optional[np.ndarray] = None

    @abstractmethod
    def predict(self, dt: float) -> None:
        """
        Perform prediction step (time update).

        Args:
            dt: Elapsed time in seconds.
        """
        pass

    @abstractmethod
    def update(self, measurement) -> None:
        """
        Perform measurement update (correction step).

        Args:
            measurement: Measurement record.
        """
        pass

    @property
    def is_initialized(self) -> bool:
        return self.state is not None and self.covariance is not None

    def get_state(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Get current state estimate and covariance.

        Returns:
            Tuple of (state_vector, covariance_matrix).
        """
        if not self.is_initialized:
            raise RuntimeError("Estimator not initialized. Process a measurement first.")
        return self.state.copy(), self.covariance.copy()
