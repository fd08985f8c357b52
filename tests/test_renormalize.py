import numpy as np
import pytest

from colortransfer.renormalize import RunningExtent, rescale


class TestRunningExtent:
    def test_initial_state(self):
        extent = RunningExtent()
        assert not extent.is_populated
        assert np.all(extent.minimum == np.inf)
        assert np.all(extent.maximum == -np.inf)

    def test_update_is_monotonic(self):
        extent = RunningExtent()
        extent.update(np.array([[1.0, 2.0, 3.0], [4.0, -1.0, 0.5]]))
        extent.update(np.array([[2.0, 2.0, 2.0]]))

        np.testing.assert_array_equal(extent.minimum, [1.0, -1.0, 0.5])
        np.testing.assert_array_equal(extent.maximum, [4.0, 2.0, 3.0])
        assert extent.count == 3

    def test_instances_do_not_share_state(self):
        first = RunningExtent()
        first.update(np.ones((1, 3)))
        second = RunningExtent()
        assert not second.is_populated
        assert np.all(second.minimum == np.inf)


class TestRescale:
    def _extent_of(self, buffer):
        extent = RunningExtent()
        extent.update(buffer)
        return extent

    def test_output_within_display_range(self):
        buffer = np.random.uniform(-500.0, 900.0, (40, 40, 3))
        result = rescale(buffer, self._extent_of(buffer), 0.0, 255.0)

        assert result.dtype == np.uint8
        assert result.shape == buffer.shape
        assert result.min() >= 0
        assert result.max() <= 255

    def test_custom_display_range(self):
        buffer = np.random.uniform(0.0, 1.0, (10, 10, 3))
        result = rescale(buffer, self._extent_of(buffer), 20.0, 200.0)
        assert result.min() >= 20
        assert result.max() <= 200

    def test_affine_map_and_rounding(self):
        buffer = np.zeros((1, 3, 3))
        buffer[0, :, :] = np.array([0.0, 5.0, 10.0])[:, None]
        result = rescale(buffer, self._extent_of(buffer), 0.0, 255.0)
        # 5 maps to 127.5, rounded half to even
        np.testing.assert_array_equal(result[0, :, 0], [0, 128, 255])

    def test_flat_channel_maps_to_midpoint(self):
        buffer = np.random.uniform(0.0, 10.0, (5, 5, 3))
        buffer[..., 2] = 42.0
        result = rescale(buffer, self._extent_of(buffer), 0.0, 255.0)
        assert np.all(result[..., 2] == 128)

    def test_uint16_output(self):
        buffer = np.random.uniform(0.0, 10.0, (5, 5, 3))
        result = rescale(buffer, self._extent_of(buffer), 0.0, 65535.0, dtype=np.uint16)
        assert result.dtype == np.uint16
        assert result.max() > 255

    def test_empty_extent_rejected(self):
        with pytest.raises(ValueError):
            rescale(np.zeros((2, 2, 3)), RunningExtent(), 0.0, 255.0)

    def test_inverted_display_range_rejected(self):
        buffer = np.random.uniform(0.0, 1.0, (2, 2, 3))
        with pytest.raises(ValueError):
            rescale(buffer, self._extent_of(buffer), 255.0, 0.0)

    def test_non_finite_extent_rejected(self):
        buffer = np.random.uniform(0.0, 1.0, (2, 2, 3))
        buffer[0, 0, 1] = np.nan
        with pytest.raises(ValueError):
            rescale(buffer, self._extent_of(buffer), 0.0, 255.0)

    def test_huge_extent_stays_in_range(self):
        buffer = np.zeros((1, 3, 3))
        buffer[0, :, :] = np.array([-4e307, 1e307, 4e307])[:, None]
        result = rescale(buffer, self._extent_of(buffer), 0.0, 255.0)
        np.testing.assert_array_equal(result[0, :, 0], [0, 159, 255])

    def test_writes_into_output_image(self):
        buffer = np.random.uniform(0.0, 10.0, (4, 5, 3))
        out = np.zeros((4, 5, 3), dtype=np.uint16)
        result = rescale(buffer, self._extent_of(buffer), 0.0, 65535.0, out=out)

        assert result is out
        assert out.max() == 65535

        with pytest.raises(ValueError):
            rescale(buffer, self._extent_of(buffer), 0.0, 255.0, out=np.zeros((2, 2, 3), np.uint8))
