import numpy as np
import pytest

from colortransfer import create_pipeline, transfer_images, colorize_images
from colortransfer.config import TransferConfig, create_transfer_config
from colortransfer.pipeline import ColorTransferPipeline


def _checkerboard():
    target = np.zeros((2, 2, 3), dtype=np.uint8)
    target[0, 0] = target[1, 1] = 255
    return target


class TestColorTransferPipeline:
    def setup_method(self):
        self.source = np.random.randint(0, 255, (30, 40, 3), dtype=np.uint8)
        self.target = np.random.randint(0, 255, (25, 35, 3), dtype=np.uint8)
        self.pipeline = ColorTransferPipeline()

    def test_initialization(self):
        assert self.pipeline.config == TransferConfig()
        assert self.pipeline.colorspace.name == "LAB10"

    def test_transfer_output(self):
        result = self.pipeline.transfer(self.source, self.target)

        assert result.mode == "transfer"
        assert result.image.shape == self.target.shape
        assert result.image.dtype == np.uint8
        assert result.parameters["display_max"] == 255.0
        assert set(result.statistics) == {"source", "target", "extent"}
        assert result.extent.is_populated

    def test_inputs_are_not_modified(self):
        source, target = self.source.copy(), self.target.copy()
        self.pipeline.transfer(self.source, self.target)
        np.testing.assert_array_equal(self.source, source)
        np.testing.assert_array_equal(self.target, target)

    def test_gray_source_checkerboard_target(self):
        source = np.full((2, 2, 3), 128, dtype=np.uint8)
        target = _checkerboard()

        result = self.pipeline.transfer(source, target)
        image = result.image.astype(int)

        # Pattern is kept: the white cells stay above the black ones
        for c in range(3):
            assert image[0, 0, c] == image[1, 1, c]
            assert image[0, 1, c] == image[1, 0, c]
            assert image[0, 0, c] > image[0, 1, c]

        np.testing.assert_allclose(
            result.statistics["source"]["stddev"], [0.0, 0.0, 0.0], atol=1e-10
        )

    def test_uniform_target_does_not_crash(self):
        target = np.full((6, 6, 3), 90, dtype=np.uint8)
        result = self.pipeline.transfer(self.source, target)

        # Every channel is flat, so everything lands on the midpoint
        assert np.all(result.image == 128)

    @pytest.mark.filterwarnings("error::RuntimeWarning")
    def test_near_flat_target_stays_finite(self):
        # A single brighter pixel gives a tiny luminance deviation and a huge
        # scale ratio, enough to push its log(LMS) past float64 range
        source = np.zeros((64, 64, 3), dtype=np.uint8)
        source[::2, ::2] = 255
        source[1::2, 1::2] = 255
        target = np.full((1000, 1000, 3), 254, dtype=np.uint8)
        target[0, 0] = 255

        result = self.pipeline.transfer(source, target)

        assert np.isfinite(result.extent.minimum).all()
        assert np.isfinite(result.extent.maximum).all()
        assert np.all(result.image[0, 0] == 255)
        assert np.all(result.image[1:] == result.image[1, 1])
        assert np.all(result.image[1, 1] < 255)

    def test_display_range(self):
        pipeline = ColorTransferPipeline(create_transfer_config(display_min=10, display_max=200))
        image = pipeline.transfer(self.source, self.target).image
        assert image.min() >= 10
        assert image.max() <= 200

    def test_uint16_images(self):
        source = np.random.randint(0, 65535, (10, 10, 3), dtype=np.uint16)
        target = np.random.randint(0, 65535, (10, 10, 3), dtype=np.uint16)
        result = self.pipeline.transfer(source, target)
        assert result.image.dtype == np.uint16
        assert result.parameters["display_max"] == 65535.0

    def test_display_max_above_component_range(self):
        pipeline = ColorTransferPipeline(TransferConfig(display_max=1000.0))
        with pytest.raises(ValueError):
            pipeline.transfer(self.source, self.target)

    def test_invalid_image(self):
        with pytest.raises(ValueError):
            self.pipeline.transfer(np.zeros((5, 5), dtype=np.uint8), self.target)
        with pytest.raises(ValueError):
            self.pipeline.transfer(self.source, self.target.astype(np.float32))


class TestColorizationPipeline:
    def setup_method(self):
        self.source = np.random.randint(1, 255, (20, 20, 3), dtype=np.uint8)
        self.target = np.random.randint(1, 255, (15, 18, 3), dtype=np.uint8)

    def test_colorize_output(self):
        pipeline = create_pipeline(samples=50, seed=3)
        result = pipeline.colorize(self.source, self.target)

        assert result.mode == "colorize"
        assert result.image.shape == self.target.shape
        assert result.parameters["samples"] == 50
        assert result.parameters["seed"] == 3
        assert sum(result.statistics["colorization"]["sample_usage"]) == 15 * 18

    def test_single_sample(self):
        pipeline = create_pipeline(samples=1, seed=0)
        result = pipeline.colorize(self.source, self.target)
        assert result.statistics["colorization"]["samples_used"] == 1

    def test_seed_is_reproducible(self):
        config = create_transfer_config(samples=40, seed=11)
        a = colorize_images(self.source, self.target, config)
        b = colorize_images(self.source, self.target, config)
        np.testing.assert_array_equal(a, b)

    def test_too_many_samples(self):
        pipeline = create_pipeline(samples=20 * 20 + 1)
        with pytest.raises(ValueError):
            pipeline.colorize(self.source, self.target)


class TestConfig:
    def test_defaults(self):
        config = create_transfer_config()
        assert config.colorspace == "LAB10"
        assert config.samples == 200
        assert config.patch_size == 2
        assert config.display_max is None

    def test_none_overrides_keep_defaults(self):
        config = create_transfer_config(samples=None, colorspace=None, seed=None)
        assert config.samples == 200
        assert config.colorspace == "LAB10"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"colorspace": "INVALID"},
            {"samples": 0},
            {"patch_size": 0},
            {"display_min": -1.0},
            {"display_min": 100.0, "display_max": 50.0},
        ],
    )
    def test_invalid(self, overrides):
        with pytest.raises(ValueError):
            create_transfer_config(**overrides)


def test_transfer_images_function():
    source = np.random.randint(0, 255, (8, 8, 3), dtype=np.uint8)
    target = np.random.randint(0, 255, (8, 8, 3), dtype=np.uint8)
    image = transfer_images(source, target)
    assert image.shape == target.shape


def test_result_save(tmp_path):
    source = np.random.randint(0, 255, (8, 8, 3), dtype=np.uint8)
    target = np.random.randint(0, 255, (8, 8, 3), dtype=np.uint8)
    result = ColorTransferPipeline().transfer(source, target)

    output = tmp_path / "out.png"
    result.save(str(output))
    assert output.exists()
