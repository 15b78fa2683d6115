"""Module for defining the nonspherical gravity potential of a central body being orbited by an object."""

from __future__ import annotations

# Standard Library Imports
from math import sqrt
from typing import TYPE_CHECKING

# Third Party Imports
from numpy import array, float64, zeros
from scipy.linalg import norm

# Local Imports
from ...common.exceptions import InsideBrillouinSphereError, PolarTrajectoryError
from ..constants import POLAR_FLOOR

# Type Checking Imports
if TYPE_CHECKING:
    # Third Party Imports
    from numpy import ndarray

    # Local Imports
    from ...potential.providers import SphericalHarmonicsProvider


def getNonSphericalHarmonics(
    ecef_pos: ndarray,
    cb_radius: float,
    degree: int,
    order: int,
) -> tuple[ndarray, ndarray]:
    r"""Compute the harmonic terms for a given position & gravity field.

    Note:
        The gravity model order must be less than or equal to the gravity model degree.

    References:
        :cite:t:`montenbruck_2012_orbits`, Eqn 3.29 - 3.31

    Args:
        ecef_pos (``ndarray``): body-fixed position for which to calculate harmonic terms (m).
        cb_radius (``float``): reference radius of the gravity field (m).
        degree (``int``): maximum degree (:math:`n`) of the harmonic terms, at least 1.
        order (``int``): maximum order (:math:`m`) of the harmonic terms, at least 1.

    Returns:
        ``ndarray``: (n+1 x m+1) matrix of recursive cosine harmonic terms.
        ``ndarray``: (n+1 x m+1) matrix of recursive sine harmonic terms.
    """
    norm_r = norm(ecef_pos)
    rho = cb_radius / norm_r
    rho_sq = rho**2
    # Normalize the body-fixed coordinates
    [x_bar, y_bar, z_bar] = ecef_pos * rho / norm_r

    v = zeros((degree + 1, order + 1), dtype=float64)
    w = zeros((degree + 1, order + 1), dtype=float64)

    v[0, 0] = rho
    v[1, 0] = z_bar * v[0, 0]
    v[1, 1] = x_bar * v[0, 0]
    w[1, 1] = y_bar * v[0, 0]

    for m in range(order + 1):
        for n in range(max(2, m), degree + 1):
            # Diagonal terms
            if m == n:
                v[m, m] = (2 * m - 1) * (x_bar * v[m - 1, m - 1] - y_bar * w[m - 1, m - 1])
                w[m, m] = (2 * m - 1) * (x_bar * w[m - 1, m - 1] + y_bar * v[m - 1, m - 1])
            # Off-diagonal terms (m < n)
            else:
                v[n, m] = (
                    (2 * n - 1) * z_bar * v[n - 1, m] - (n + m - 1) * rho_sq * v[n - 2, m]
                ) / (n - m)
                if m != 0:
                    w[n, m] = (
                        (2 * n - 1) * z_bar * w[n - 1, m] - (n + m - 1) * rho_sq * w[n - 2, m]
                    ) / (n - m)

    return v, w


def cunninghamAcceleration(
    ecef_pos: ndarray,
    cb_mu: float,
    cb_radius: float,
    c: ndarray,
    s: ndarray,
    max_degree: int,
    max_order: int,
) -> ndarray:
    r"""Compute the non-spherical acceleration with the rectangular coordinates recursion.

    Every term of degree 1 and above is included, the central :math:`-\mu \vec{r}/r^3` term
    is not. The recursion has no singularity on the polar axis.

    References:
        :cite:t:`montenbruck_2012_orbits`, Eqn 3.32 - 3.33

    Args:
        ecef_pos (``ndarray``): body-fixed position at which to calculate the acceleration (m).
        cb_mu (``float``): central body's gravitational parameter, (m^3/sec^2).
        cb_radius (``float``): reference radius of the gravity field (m).
        c (``ndarray``): cosine geopotential coefficients, not normalized.
        s (``ndarray``): sine geopotential coefficients, not normalized.
        max_degree (``int``): maximum degree (:math:`n`) of the gravity model
        max_order (``int``): maximum order (:math`m`) of the gravity model

    Returns:
        ``ndarray``: perturbing acceleration in body-fixed coordinates, (m/sec^2).

    Raises:
        InsideBrillouinSphereError: if `ecef_pos` is within the reference sphere.
    """
    norm_r = norm(ecef_pos)
    if norm_r <= cb_radius:
        raise InsideBrillouinSphereError(
            f"Position at {norm_r} m lies inside the {cb_radius} m reference sphere",
        )

    # We require one degree & order higher harmonic terms due to the partial acceleration equations
    v, w = getNonSphericalHarmonics(ecef_pos, cb_radius, max_degree + 1, max_order + 1)
    acceleration = zeros((3,), dtype=float64)
    for n in range(1, max_degree + 1):
        for m in range(min(n, max_order) + 1):
            z_acc = (n - m + 1) * (-c[n, m] * v[n + 1, m] - s[n, m] * w[n + 1, m])
            # Zonal partial acceleration terms (simplified x/y/z equations)
            if m == 0:
                x_acc = -c[n, 0] * v[n + 1, 1]
                y_acc = -c[n, 0] * w[n + 1, 1]
            # Tesseral & sectoral partial accelerations terms
            else:
                fact_term = (n - m + 1) * (n - m + 2)
                x_acc = 0.5 * (
                    -c[n, m] * v[n + 1, m + 1]
                    - s[n, m] * w[n + 1, m + 1]
                    + fact_term * (c[n, m] * v[n + 1, m - 1] + s[n, m] * w[n + 1, m - 1])
                )
                y_acc = 0.5 * (
                    -c[n, m] * w[n + 1, m + 1]
                    + s[n, m] * v[n + 1, m + 1]
                    + fact_term * (-c[n, m] * w[n + 1, m - 1] + s[n, m] * v[n + 1, m - 1])
                )

            acceleration += array((x_acc, y_acc, z_acc), dtype=float64)

    return acceleration * cb_mu / (cb_radius**2)


def drozinerAcceleration(
    ecef_pos: ndarray,
    provider: SphericalHarmonicsProvider,
    offset: float,
    polar_floor: float = POLAR_FLOOR,
) -> ndarray:
    r"""Compute the non-spherical acceleration with the Droziner zonal/tesseral recursion.

    The zonal part rolls two consecutive states of the recursion over the degree. The tesseral
    part nests a degree recursion inside an order loop, with three branches depending on how far
    the order is from the degree, and advances :math:`\cos(jL)` & :math:`\sin(jL)` by angle
    addition. Every term of degree 1 and above is included, the central term is not.

    References:
        #. :cite:t:`droziner_1977_acceleration`

    Args:
        ecef_pos (``ndarray``): body-fixed position at which to calculate the acceleration (m).
        provider (:class:`.SphericalHarmonicsProvider`): un-normalized coefficients source.
        offset (``float``): seconds since the reference date of `provider`.
        polar_floor (``float``, optional): smallest accepted distance to the polar axis, (m).

    Returns:
        ``ndarray``: perturbing acceleration in body-fixed coordinates, (m/sec^2).

    Raises:
        PolarTrajectoryError: if `ecef_pos` is within `polar_floor` of the polar axis.
        InsideBrillouinSphereError: if `ecef_pos` is within the reference sphere.
    """
    x_body, y_body, z_body = (float(component) for component in ecef_pos)
    mu = provider.getMu()
    max_degree = provider.getMaxDegree()
    max_order = provider.getMaxOrder()

    r12 = x_body * x_body + y_body * y_body
    r1 = sqrt(r12)
    if r1 <= polar_floor:
        raise PolarTrajectoryError(f"Position {r1} m away from the polar axis, below {polar_floor} m")
    r2 = r12 + z_body * z_body
    r = sqrt(r2)
    equatorial_radius = provider.getAe()
    if r <= equatorial_radius:
        raise InsideBrillouinSphereError(
            f"Position at {r} m lies inside the {equatorial_radius} m reference sphere",
        )
    r3 = r2 * r
    ae_on_r = equatorial_radius / r
    z_on_r = z_body / r
    r1_on_r = r1 / r

    m_mu_on_r3 = -mu / r3
    x_dot_dot_k = x_body * m_mu_on_r3
    y_dot_dot_k = y_body * m_mu_on_r3

    a_x, a_y, a_z = 0.0, 0.0, 0.0

    # Zonal part of acceleration
    if max_degree >= 1:
        b_k1 = z_on_r
        b_k0 = ae_on_r * (3 * b_k1 * b_k1 - 1.0)
        j_k = -provider.getUnnormalizedCnm(offset, 1, 0)
        sum_a = j_k * (2 * ae_on_r * b_k1 - z_on_r * b_k0)
        sum_b = j_k * b_k0

        for k in range(2, max_degree + 1):
            b_k2 = b_k1
            b_k1 = b_k0
            p = (1.0 + k) / k
            b_k0 = ae_on_r * ((1 + p) * z_on_r * b_k1 - (k * ae_on_r * b_k2) / (k - 1))
            a_k0 = p * ae_on_r * b_k1 - z_on_r * b_k0
            j_k = -provider.getUnnormalizedCnm(offset, k, 0)
            sum_a += j_k * a_k0
            sum_b += j_k * b_k0

        p = -sum_a / (r1_on_r * r1_on_r)
        a_x = x_dot_dot_k * p
        a_y = y_dot_dot_k * p
        a_z = mu * sum_b / r2

    # Tesseral & sectoral part of acceleration
    if max_order > 0:
        cos_l = x_body / r1
        sin_l = y_body / r1
        beta_k_minus_1 = ae_on_r

        cos_jm1_l, sin_jm1_l = cos_l, sin_l
        cos_j_l, sin_j_l = cos_l, sin_l
        beta_k = 0.0
        b_kj = 0.0
        b_km1_j = 3 * beta_k_minus_1 * z_on_r * r1_on_r
        b_km2_j = 0.0
        b_km1_km1 = b_km1_j

        # Degree 1 terms
        c11 = provider.getUnnormalizedCnm(offset, 1, 1)
        s11 = provider.getUnnormalizedSnm(offset, 1, 1)
        g_kj = c11 * cos_l + s11 * sin_l
        h_kj = c11 * sin_l - s11 * cos_l
        a_kj = 2 * r1_on_r * beta_k_minus_1 - z_on_r * b_km1_km1
        d_kj = (a_kj + z_on_r * b_km1_km1) * 0.5
        sum1 = a_kj * g_kj
        sum2 = b_km1_km1 * g_kj
        sum3 = d_kj * h_kj

        for j in range(1, max_order + 1):
            inner_sum1, inner_sum2, inner_sum3 = 0.0, 0.0, 0.0

            for k in range(max(2, j), max_degree + 1):
                ckj = provider.getUnnormalizedCnm(offset, k, j)
                skj = provider.getUnnormalizedSnm(offset, k, j)
                g_kj = ckj * cos_j_l + skj * sin_j_l
                h_kj = ckj * sin_j_l - skj * cos_j_l

                if j <= k - 2:
                    b_kj = ae_on_r * (
                        z_on_r * b_km1_j * (2.0 * k + 1.0) / (k - j)
                        - ae_on_r * b_km2_j * (k + j) / (k - 1 - j)
                    )
                    a_kj = ae_on_r * b_km1_j * (k + 1.0) / (k - j) - z_on_r * b_kj
                elif j == k - 1:
                    beta_k = ae_on_r * (2.0 * k - 1.0) * r1_on_r * beta_k_minus_1
                    b_kj = ae_on_r * (2.0 * k + 1.0) * z_on_r * b_km1_j - beta_k
                    a_kj = ae_on_r * (k + 1.0) * b_km1_j - z_on_r * b_kj
                    beta_k_minus_1 = beta_k
                else:
                    b_kj = (2 * k + 1) * ae_on_r * r1_on_r * b_km1_km1
                    a_kj = (k + 1) * r1_on_r * beta_k - z_on_r * b_kj
                    b_km1_km1 = b_kj

                d_kj = (a_kj + z_on_r * b_kj) * j / (k + 1.0)

                b_km2_j = b_km1_j
                b_km1_j = b_kj

                inner_sum1 += a_kj * g_kj
                inner_sum2 += b_kj * g_kj
                inner_sum3 += d_kj * h_kj

            sum1 += inner_sum1
            sum2 += inner_sum2
            sum3 += inner_sum3

            # Advance the longitude multiples by angle addition
            sin_j_l = sin_jm1_l * cos_l + cos_jm1_l * sin_l
            cos_j_l = cos_jm1_l * cos_l - sin_jm1_l * sin_l
            sin_jm1_l, cos_jm1_l = sin_j_l, cos_j_l

        r2_on_r12 = r2 / r12
        p1 = r2_on_r12 * x_dot_dot_k
        p2 = r2_on_r12 * y_dot_dot_k
        a_x += p1 * sum1 - p2 * sum3
        a_y += p2 * sum1 + p1 * sum3
        a_z -= mu * sum2 / r2

    return array((a_x, a_y, a_z), dtype=float64)
