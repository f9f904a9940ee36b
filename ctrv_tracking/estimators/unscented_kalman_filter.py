"""
Unscented Kalman Filter with a CTRV motion model for lidar/radar fusion.

State: x = [px, py, v, yaw, yaw_rate]

Each measurement triggers:
    1. Initialization (first measurement only), or
    2. Prediction to the measurement timestamp:
        - Augment the state with the two process noise components
        - Generate 2 * n_aug + 1 sigma points from the Cholesky factor of
          the augmented covariance
        - Propagate every sigma point through the CTRV model
        - Recombine into predicted mean and covariance
    3. Correction:
        - Lidar: closed-form linear Kalman update
        - Radar: second unscented transform of the predicted sigma points
          into (rho, phi, rho_dot) space

Heading (state index 3) and bearing (measurement index 1) residuals are
normalized into (-π, π] wherever they are formed.
"""

from typing import Dict, Optional, Tuple

import numpy as np
from scipy import linalg

from ctrv_tracking.config import FilterConfig
from ctrv_tracking.estimators.base import StateEstimator
from ctrv_tracking.estimators.exceptions import (
    CovarianceDegeneracyError,
    FilterDivergedError,
    FilterError,
    MeasurementOrderError,
)
from ctrv_tracking.fusion.types import MeasurementPackage, SensorType
from ctrv_tracking.models.measurement_models import (
    N_Z_LIDAR,
    N_Z_RADAR,
    STD_LASPX,
    STD_LASPY,
    STD_RADPHI,
    STD_RADR,
    LidarMeasurementModel,
    RadarMeasurementModel,
    polar_to_cartesian,
)
from ctrv_tracking.models.motion_models import N_AUG, N_X, CTRVModel
from ctrv_tracking.utils import angle_diff, normalize_angle


N_SIGMA = 2 * N_AUG + 1

# Heading index in the state vector
YAW_INDEX = 3


def state_residual(x: np.ndarray, x_ref: np.ndarray) -> np.ndarray:
    """
    Difference x - x_ref with the heading component normalized.

    Args:
        x: State(s), shape (5,) or (N, 5)
        x_ref: Reference state, shape (5,)

    Returns:
        Residual with the same shape as x.

    Example:
        >>> a = np.array([0, 0, 0, 3.1, 0])
        >>> b = np.array([0, 0, 0, -3.1, 0])
        >>> state_residual(a, b)[3]
        -0.08318530717958605
    """
    x = np.asarray(x, dtype=float)
    x_ref = np.asarray(x_ref, dtype=float)
    diff = x - x_ref
    diff[..., YAW_INDEX] = angle_diff(x[..., YAW_INDEX], x_ref[..., YAW_INDEX])
    return diff


class CTRVUnscentedKalmanFilter(StateEstimator):
    """
    Unscented Kalman Filter tracking one object with a CTRV motion model.

    One instance owns one state/covariance pair; track several objects with
    several instances.

    Attributes:
        config: FilterConfig with process noise and sensor switches.
        state: Current state estimate [px, py, v, yaw, yaw_rate] (5,)
        covariance: Current state covariance (5x5)
        sigma_points_pred: Predicted sigma points from the last prediction,
            one per row (15, 5)
        weights: Sigma point weights (15,), read-only
        lambda_: Spread parameter, 3 - n_aug
        time_us: Timestamp (microseconds) of the last processed measurement
        last_nis: Normalized innovation squared of the most recent update
            for each sensor type

    Example:
        >>> ukf = CTRVUnscentedKalmanFilter()
        >>> ukf.process_measurement(MeasurementPackage.lidar(1.0, 2.0, timestamp=0))
        >>> ukf.state
        array([1., 2., 0., 0., 0.])
    """

    def __init__(self, config: Optional[FilterConfig] = None):
        """
        Initialize the filter.

        Args:
            config: Filter configuration. Defaults to FilterConfig().
        """
        super().__init__(N_X)

        self.config = config if config is not None else FilterConfig()

        self.motion_model = CTRVModel(self.config.std_a, self.config.std_yawdd)
        self.lidar_model = LidarMeasurementModel()
        self.radar_model = RadarMeasurementModel()

        self.lambda_ = 3 - N_AUG
        self._compute_weights()

        self.sigma_points_pred = np.zeros((N_SIGMA, N_X))
        self.time_us: Optional[int] = None
        self.last_nis: Dict[SensorType, float] = {}

        self._sigma_points_valid = False
        self._diverged = False

    def _compute_weights(self) -> None:
        """
        Compute the sigma point weights.

        w_0 = λ / (λ + n_aug), w_i = 1 / (2 (λ + n_aug)) for i = 1..2 n_aug.
        """
        weights = np.full(N_SIGMA, 1.0 / (2.0 * (self.lambda_ + N_AUG)))
        weights[0] = self.lambda_ / (self.lambda_ + N_AUG)
        weights.setflags(write=False)
        self.weights = weights

    @property
    def use_lidar(self) -> bool:
        return self.config.use_lidar

    @property
    def use_radar(self) -> bool:
        return self.config.use_radar

    @property
    def diverged(self) -> bool:
        return self._diverged

    def reset(self) -> None:
        """Forget the current estimate; the next measurement re-initializes."""
        self.state = None
        self.covariance = None
        self.sigma_points_pred = np.zeros((N_SIGMA, N_X))
        self.time_us = None
        self.last_nis = {}
        self._sigma_points_valid = False
        self._diverged = False

    def _degenerate(self, message: str) -> CovarianceDegeneracyError:
        """Mark the filter diverged and build the error to raise."""
        self._diverged = True
        return CovarianceDegeneracyError(message)

    def process_measurement(self, measurement: MeasurementPackage) -> None:
        """
        Process one measurement: initialize, or predict then correct.

        Measurements from a sensor whose fusion is disabled still advance the
        prediction to their timestamp but do not correct the state.

        Args:
            measurement: Validated measurement record.

        Raises:
            FilterDivergedError: If an earlier step failed numerically.
            MeasurementOrderError: If the timestamp precedes the last one.
                The filter is left untouched.
            CovarianceDegeneracyError: If this step fails numerically.
        """
        if self._diverged:
            raise FilterDivergedError(
                "Filter diverged on an earlier measurement; call reset() before reuse"
            )
        if not isinstance(measurement, MeasurementPackage):
            raise TypeError(f"Expected MeasurementPackage, got {type(measurement)}")

        if not self.is_initialized:
            self.initialize(measurement)
            return

        dt = (measurement.timestamp - self.time_us) / 1e6
        if dt < 0:
            raise MeasurementOrderError(
                f"Measurement at {measurement.timestamp} us precedes the last processed "
                f"measurement at {self.time_us} us"
            )

        snapshot = (
            self.state, self.covariance, self.sigma_points_pred,
            self.time_us, self._sigma_points_valid,
        )
        try:
            self.predict(dt)
            self.time_us = measurement.timestamp

            if measurement.sensor_type is SensorType.LIDAR and self.use_lidar:
                self.update_lidar(measurement.raw_measurements)
            elif measurement.sensor_type is SensorType.RADAR and self.use_radar:
                self.update_radar(measurement.raw_measurements)
        except FilterError:
            # A failed correction must not leave the prediction applied
            (self.state, self.covariance, self.sigma_points_pred,
             self.time_us, self._sigma_points_valid) = snapshot
            raise

    def initialize(self, measurement: MeasurementPackage) -> None:
        """
        Set the initial mean and covariance from a single measurement.

        Velocity, heading and yaw rate start at zero with unit variance. The
        position variance comes from the sensor noise: the lidar variances
        directly, or (std_range + std_bearing)^2 for a radar fix.
        """
        z = measurement.raw_measurements
        x = np.zeros(N_X)
        P = np.eye(N_X)

        if measurement.sensor_type is SensorType.LIDAR:
            x[0:2] = z[0:2]
            P[0, 0] = STD_LASPX ** 2
            P[1, 1] = STD_LASPY ** 2
        else:
            x[0:2] = polar_to_cartesian(z[0], z[1])
            P[0, 0] = P[1, 1] = (STD_RADR + STD_RADPHI) ** 2

        self.state = x
        self.covariance = P
        self.time_us = measurement.timestamp
        self._sigma_points_valid = False

    def generate_augmented_sigma_points(self) -> np.ndarray:
        """
        Generate sigma points of the augmented state.

        Returns:
            Augmented sigma points (15, 7), one per row:
                χ_0 = x_aug
                χ_i = x_aug + sqrt(λ + n_aug) L_i
                χ_{i+n_aug} = x_aug - sqrt(λ + n_aug) L_i
            where L is the lower Cholesky factor of P_aug.

        Raises:
            CovarianceDegeneracyError: If P_aug is not positive definite.
        """
        x_aug = np.zeros(N_AUG)
        x_aug[:N_X] = self.state

        P_aug = np.zeros((N_AUG, N_AUG))
        P_aug[:N_X, :N_X] = self.covariance
        P_aug[N_X:, N_X:] = self.motion_model.Q()

        try:
            L = linalg.cholesky(P_aug, lower=True)
        except (np.linalg.LinAlgError, ValueError) as exc:
            raise self._degenerate(
                f"Augmented covariance is not positive definite: {exc}"
            ) from exc

        spread = np.sqrt(self.lambda_ + N_AUG)
        sigma_points = np.zeros((N_SIGMA, N_AUG))
        sigma_points[0] = x_aug
        for i in range(N_AUG):
            sigma_points[i + 1] = x_aug + spread * L[:, i]
            sigma_points[i + 1 + N_AUG] = x_aug - spread * L[:, i]

        return sigma_points

    def predict_sigma_points(self, sigma_points_aug: np.ndarray, dt: float) -> np.ndarray:
        """
        Propagate augmented sigma points through the CTRV model.

        Args:
            sigma_points_aug: Augmented sigma points (15, 7)
            dt: Elapsed time in seconds

        Returns:
            Predicted sigma points (15, 5)
        """
        if sigma_points_aug.shape != (N_SIGMA, N_AUG):
            raise ValueError(
                f"Augmented sigma points must have shape ({N_SIGMA}, {N_AUG}), "
                f"got {sigma_points_aug.shape}"
            )
        return np.array([
            self.motion_model.f_augmented(sp, dt) for sp in sigma_points_aug
        ])

    def predict_mean_and_covariance(
        self, sigma_points_pred: np.ndarray
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Recombine predicted sigma points into mean and covariance.

        Args:
            sigma_points_pred: Predicted sigma points (15, 5)

        Returns:
            Tuple of (mean (5,), covariance (5x5)).
        """
        mean = self.weights @ sigma_points_pred

        diff = state_residual(sigma_points_pred, mean)
        covariance = (
            self.weights[:, np.newaxis, np.newaxis] * diff[:, :, np.newaxis] * diff[:, np.newaxis, :]
        ).sum(axis=0)

        return mean, covariance

    def predict(self, dt: float) -> None:
        """
        Unscented prediction over dt seconds.

        A zero dt is an identity propagation that refreshes the predicted
        sigma points.

        Args:
            dt: Elapsed time in seconds, >= 0.

        Raises:
            RuntimeError: If the filter is not initialized.
            MeasurementOrderError: If dt is negative.
            CovarianceDegeneracyError: If the covariance has degenerated.
        """
        if not self.is_initialized:
            raise RuntimeError("Filter must be initialized before predict()")
        if dt < 0:
            raise MeasurementOrderError(f"Elapsed time must be non-negative, got {dt}")

        sigma_points_aug = self.generate_augmented_sigma_points()
        sigma_points_pred = self.predict_sigma_points(sigma_points_aug, dt)
        x_pred, P_pred = self.predict_mean_and_covariance(sigma_points_pred)

        if not (np.all(np.isfinite(x_pred)) and np.all(np.isfinite(P_pred))):
            raise self._degenerate("Prediction produced non-finite state or covariance")

        self.sigma_points_pred = sigma_points_pred
        self.state = x_pred
        self.covariance = 0.5 * (P_pred + P_pred.T)
        self._sigma_points_valid = True

    def update(self, measurement: MeasurementPackage) -> None:
        """
        Correct the current estimate with a measurement of either sensor.

        Unlike process_measurement(), this ignores the sensor switches and
        does not predict.
        """
        if measurement.sensor_type is SensorType.LIDAR:
            self.update_lidar(measurement.raw_measurements)
        else:
            self.update_radar(measurement.raw_measurements)

    def _factorize_innovation_covariance(self, S: np.ndarray):
        try:
            return linalg.cho_factor(S, lower=True)
        except (np.linalg.LinAlgError, ValueError) as exc:
            raise self._degenerate(
                f"Innovation covariance is singular or not positive definite: {exc}"
            ) from exc

    def _commit_update(
        self, x: np.ndarray, P: np.ndarray, sensor_type: SensorType, nis: float
    ) -> None:
        if not (np.all(np.isfinite(x)) and np.all(np.isfinite(P))):
            raise self._degenerate(
                f"{sensor_type.value} update produced non-finite state or covariance"
            )
        self.state = x
        self.covariance = 0.5 * (P + P.T)
        self.last_nis[sensor_type] = nis
        # Predicted sigma points no longer describe the corrected estimate
        self._sigma_points_valid = False

    def update_lidar(self, z: np.ndarray) -> None:
        """
        Linear Kalman update with a lidar position measurement.

            y = z - H x
            S = H P H^T + R
            K = P H^T S^{-1}
            x = x + K y
            P = (I - K H) P

        Args:
            z: Lidar measurement [px, py]

        Raises:
            CovarianceDegeneracyError: If S is singular.
        """
        if not self.is_initialized:
            raise RuntimeError("Filter must be initialized before update_lidar()")
        z = np.asarray(z, dtype=float)
        if z.shape != (N_Z_LIDAR,):
            raise ValueError(f"Lidar measurement must have shape ({N_Z_LIDAR},), got {z.shape}")

        H = self.lidar_model.H
        y = self.lidar_model.innovation(z, self.lidar_model.h(self.state))
        PHt = self.covariance @ H.T
        S = H @ PHt + self.lidar_model.R

        factor = self._factorize_innovation_covariance(S)
        K = linalg.cho_solve(factor, PHt.T).T
        nis = float(y @ linalg.cho_solve(factor, y))

        x = self.state + K @ y
        P = (np.eye(N_X) - K @ H) @ self.covariance

        self._commit_update(x, P, SensorType.LIDAR, nis)

    def update_radar(self, z: np.ndarray) -> None:
        """
        Unscented Kalman update with a radar measurement.

        Projects the predicted sigma points into measurement space, then:
            z_pred = Σ w_i Z_i
            S = Σ w_i (Z_i - z_pred)(Z_i - z_pred)^T + R
            T = Σ w_i (X_i - x)(Z_i - z_pred)^T
            K = T S^{-1}
            x = x + K (z - z_pred)
            P = P - K S K^T

        Args:
            z: Radar measurement [rho, phi, rho_dot]

        Raises:
            RuntimeError: If no prediction has produced sigma points yet.
            CovarianceDegeneracyError: If S is singular.
        """
        if not self._sigma_points_valid:
            raise RuntimeError("predict() must run before update_radar()")
        z = np.asarray(z, dtype=float)
        if z.shape != (N_Z_RADAR,):
            raise ValueError(f"Radar measurement must have shape ({N_Z_RADAR},), got {z.shape}")

        w = self.weights
        Zsig = self.radar_model.h_sigma_points(self.sigma_points_pred)
        z_pred = w @ Zsig
        z_pred[1] = normalize_angle(z_pred[1])

        z_diff = self.radar_model.innovation(Zsig, z_pred)
        S = (w[:, np.newaxis, np.newaxis] * z_diff[:, :, np.newaxis] * z_diff[:, np.newaxis, :]).sum(axis=0)
        S = S + self.radar_model.R

        x_diff = state_residual(self.sigma_points_pred, self.state)
        Tc = (w[:, np.newaxis, np.newaxis] * x_diff[:, :, np.newaxis] * z_diff[:, np.newaxis, :]).sum(axis=0)

        factor = self._factorize_innovation_covariance(S)
        K = linalg.cho_solve(factor, Tc.T).T

        y = self.radar_model.innovation(z, z_pred)
        nis = float(y @ linalg.cho_solve(factor, y))

        x = self.state + K @ y
        P = self.covariance - K @ S @ K.T

        self._commit_update(x, P, SensorType.RADAR, nis)
