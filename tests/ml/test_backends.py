"""Tests for tensor backend resolution."""

import pytest
import torch

from detpyramid.core.errors import BackendError
from detpyramid.ml.backends import (
    TorchBackend,
    get_backend,
    register_backend,
    registered_backends,
    unregister_backend,
)


class TestBackendFactory:
    """Tests for get_backend."""

    def test_default_is_torch(self):
        """Test the default backend is torch."""
        backend = get_backend()
        assert isinstance(backend, TorchBackend)
        assert backend.name == "torch"

    def test_name_normalized(self):
        """Test backend names are case-insensitive."""
        assert isinstance(get_backend("TORCH"), TorchBackend)

    def test_unknown_backend(self):
        """Test unknown names raise a backend error."""
        with pytest.raises(BackendError, match="Unknown backend") as exc_info:
            get_backend("jax")
        assert exc_info.value.error_code == "UNKNOWN_BACKEND"

    def test_custom_provider(self):
        """Test registered providers are resolved by name."""
        register_backend("torch64", lambda: TorchBackend(dtype=torch.float64))
        try:
            assert "torch64" in registered_backends()
            assert get_backend("torch64").dtype == torch.float64
        finally:
            unregister_backend("torch64")
        assert "torch64" not in registered_backends()

    def test_provider_must_return_backend(self):
        """Test providers returning other objects are rejected."""
        register_backend("broken", object)
        try:
            with pytest.raises(TypeError, match="TensorBackend"):
                get_backend("broken")
        finally:
            unregister_backend("broken")


class TestTorchBackend:
    """Tests for TorchBackend operations."""

    def test_concat_channel_order(self):
        """Test concatenation keeps operand order along channels."""
        ops = TorchBackend()
        a = torch.zeros(1, 2, 3, 3)
        b = torch.ones(1, 1, 3, 3)
        out = ops.concat([a, b])

        assert out.shape == (1, 3, 3, 3)
        assert torch.all(out[:, :2] == 0)
        assert torch.all(out[:, 2:] == 1)

    def test_upsample_nearest_replicates(self):
        """Test nearest upsampling copies source pixels."""
        ops = TorchBackend()
        x = torch.tensor([[[[1.0, 2.0], [3.0, 4.0]]]])
        out = ops.upsample_nearest(x, (4, 4))

        assert ops.spatial_size(out) == (4, 4)
        assert out[0, 0, 0, 1] == 1.0
        assert out[0, 0, 3, 3] == 4.0

    def test_layer_factories(self):
        """Test layer factories honour their arguments."""
        ops = TorchBackend()
        conv = ops.conv2d(3, 8, 3, stride=2, padding=1)

        assert conv(torch.rand(1, 3, 16, 16)).shape == (1, 8, 8, 8)
        assert ops.max_pool(2, 2)(torch.rand(1, 1, 4, 4)).shape == (1, 1, 2, 2)
        assert ops.batch_norm(8).num_features == 8
        assert ops.shape(torch.rand(2, 3)) == (2, 3)
