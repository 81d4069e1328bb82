"""Tests for the projax.config module."""

import jax
import jax.numpy as jnp
import pytest

from projax.config import get_convergence_tolerance, get_dtype, set_dtype
from projax.geocentric import geodetic_to_geocentric


@pytest.fixture(autouse=True)
def reset_dtype():
    """Reset dtype to float64 before and after each test."""
    set_dtype(jnp.float64)
    yield
    set_dtype(jnp.float64)


class TestGetSetDtype:
    def test_default_dtype(self):
        assert get_dtype() == jnp.float64

    def test_set_float32(self):
        set_dtype(jnp.float32)
        assert get_dtype() == jnp.float32

    def test_roundtrip(self):
        for dtype in (jnp.float32, jnp.float64):
            set_dtype(dtype)
            assert get_dtype() == dtype

    def test_invalid_dtype_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype(jnp.int32)

    def test_float16_rejected(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype(jnp.float16)

    def test_invalid_dtype_string_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype("float32")

    def test_import_enables_x64(self):
        assert jax.config.jax_enable_x64 is True


class TestConvergenceTolerance:
    def test_float64_tolerance(self):
        assert get_convergence_tolerance() == 1e-12

    def test_float32_tolerance(self):
        set_dtype(jnp.float32)
        assert get_convergence_tolerance() == 1e-6

    def test_float64_meets_geodetic_bound(self):
        assert get_convergence_tolerance() <= 1e-11


class TestDtypeAffectsKernels:
    def test_float64_output(self):
        x, _, _, _ = geodetic_to_geocentric(0.1, 0.2, 0.0, 6378137.0, 0.00669437999014)
        assert x.dtype == jnp.float64

    def test_float32_output(self):
        set_dtype(jnp.float32)
        x, _, _, _ = geodetic_to_geocentric(0.1, 0.2, 0.0, 6378137.0, 0.00669437999014)
        assert x.dtype == jnp.float32
