"""
The `constants` module defines mathematical and geodetic constants used by the transform pipeline.
"""

from jax.numpy import pi as PI

# Mathematical Constants
"""
Constant to convert degrees to radians. Equal to 2pi/360. Units: *rad/deg*
"""
DEG2RAD = 2.0 * PI / 360.0

"""
Constant to convert radians to degrees. Equal to 360/2pi. Units: *deg/rad*
"""
RAD2DEG = 360.0 / (PI * 2.0)

"""
Constant to convert arcseconds to radians. Equal to 2pi/(360*3600). Units: *rad/as*
"""
AS2RAD = 2.0 * PI / 360.0 / 3600.0

"""
Constant to convert radians to arcseconds. Equal to (360*3600)/(2pi). Units: *as/rad*
"""
RAD2AS = 360.0 * 3600.0 / PI / 2.0

"""
Constant to convert parts-per-million to a dimensionless ratio. Units: *1/ppm*
"""
PPM = 1.0e-6

HALF_PI = 0.5 * PI

TWO_PI = 2.0 * PI

# Earth Constants
"""
Earth's semi-major axis as defined by the WGS84 geodetic system. [m]

References:

1. NIMA Technical Report TR8350.2
"""
WGS84_a = 6378137.0  # WGS-84 semi-major axis

"""
Earth's ellipsoidal flattening.  WGS84 Value.

References:

1. NIMA Technical Report TR8350.2
"""
WGS84_f = 1.0 / 298.257223563  # WGS-84 flattening

"""
Semi-major axis of the GRS80 ellipsoid. [m]

References:

1. H. Moritz, *Geodetic Reference System 1980*, Bulletin Géodésique 54, 1980.
"""
GRS80_a = 6378137.0

"""
Flattening of the GRS80 ellipsoid. [dimensionless]
"""
GRS80_f = 1.0 / 298.257222101

# Comparison tolerances
"""
Maximum semi-major axis difference for two ellipsoids to compare equal. [m]
"""
ELLIPSOID_A_TOLERANCE = 1.0e-6

"""
Maximum eccentricity-squared difference for two ellipsoids to compare equal.
Wide enough that GRS80 and WGS84 (Δe² ≈ 3.3e-11) are treated as one. [dimensionless]
"""
ELLIPSOID_E2_TOLERANCE = 5.0e-11

"""
Maximum Bowring iterations for geocentric to geodetic latitude recovery.
"""
GEOCENTRIC_MAX_ITERATIONS = 15

"""
Latitudes this far past a pole (as a ratio of pi/2) are clamped onto the pole
before geocentric conversion; anything further is out of domain.
"""
POLE_CLAMP_RATIO = 1.001
