"""Tests for image display transforms and export.

Tests cover:
- Tone mapping operators
- Gamma encoding and clamping
- Collecting pixel streams into arrays
- 8-bit conversion
- Writing PNG and PPM files and streams
- RMSE comparison
"""

import io

import numpy as np
import pytest


class TestToneMapping:
    """Tests for tone mapping operators."""

    def test_reinhard(self):
        """Test c / (1 + c) and clipping of negatives."""
        from glint.preview.display import tone_map_reinhard

        image = np.array([[[0.0, 1.0, 3.0]], [[-1.0, 0.5, 9.0]]])
        result = tone_map_reinhard(image)

        assert result.dtype == np.float32
        assert np.allclose(result[0, 0], [0.0, 0.5, 0.75])
        assert np.allclose(result[1, 0], [0.0, 1.0 / 3.0, 0.9])

    def test_exposure(self):
        """Test 1 - exp(-c * exposure)."""
        from glint.preview.display import tone_map_exposure

        image = np.array([[[0.0, 1.0, 2.0]]])
        result = tone_map_exposure(image, exposure=0.5)

        assert np.allclose(result[0, 0], 1.0 - np.exp(-np.array([0.0, 0.5, 1.0])))

    def test_unknown_method_raises(self):
        """Test that unknown tone mapping names are rejected."""
        from glint.preview.display import process_image_for_display

        with pytest.raises(ValueError, match="Unknown tone mapping"):
            process_image_for_display(np.zeros((1, 1, 3)), tone_map="filmic")


class TestGamma:
    """Tests for gamma encoding."""

    def test_default_is_linear_clamp(self):
        """Test that gamma 1.0 only clamps."""
        from glint.preview.display import apply_gamma

        image = np.array([[[-0.5, 0.25, 1.5]]])
        assert np.allclose(apply_gamma(image), [[[0.0, 0.25, 1.0]]])

    def test_gamma_encoding(self):
        """Test c ** (1 / gamma)."""
        from glint.preview.display import apply_gamma

        image = np.array([[[0.25, 1.0, 0.0]]])
        assert np.allclose(apply_gamma(image, gamma=2.0), [[[0.5, 1.0, 0.0]]])

    def test_non_positive_gamma_raises(self):
        """Test that gamma must be positive."""
        from glint.preview.display import apply_gamma

        with pytest.raises(ValueError, match="positive"):
            apply_gamma(np.zeros((1, 1, 3)), gamma=0.0)

    def test_process_clamps(self):
        """Test that the full pipeline output lies in [0, 1]."""
        from glint.preview.display import process_image_for_display

        image = np.array([[[-2.0, 0.3, 7.0]]])
        result = process_image_for_display(image)

        assert result.min() >= 0.0
        assert result.max() <= 1.0


class TestPixelsToArray:
    """Tests for collecting pixel streams."""

    def test_row_major_order(self):
        """Test that the first width pixels form the top row."""
        from glint.preview.export import pixels_to_array

        pixels = [(float(i), 0.0, 0.0) for i in range(6)]
        image = pixels_to_array(pixels, 3, 2)

        assert image.shape == (2, 3, 3)
        assert image.dtype == np.float32
        assert image[0, 2, 0] == 2.0
        assert image[1, 0, 0] == 3.0

    def test_count_mismatch_raises(self):
        """Test that a short stream is rejected."""
        from glint.preview.export import pixels_to_array

        with pytest.raises(ValueError, match="Expected 6 pixels"):
            pixels_to_array([(0.0, 0.0, 0.0)] * 5, 3, 2)

    def test_empty_image(self):
        """Test a zero-sized image."""
        from glint.preview.export import pixels_to_array

        assert pixels_to_array([], 0, 0).shape == (0, 0, 3)


class TestUint8:
    """Tests for 8-bit conversion."""

    def test_endpoints_and_clamping(self):
        """Test 0 -> 0, 1 -> 255 and clamping outside [0, 1]."""
        from glint.preview.export import image_to_uint8

        image = np.array([[[0.0, 1.0, 2.0], [-1.0, 0.2, 1.0]]])
        result = image_to_uint8(image)

        assert result.dtype == np.uint8
        assert result[0, 0].tolist() == [0, 255, 255]
        assert result[0, 1].tolist() == [0, 51, 255]


class TestSaveImage:
    """Tests for writing image files."""

    def test_png_round_trip(self, tmp_path):
        """Test that a PNG file keeps size and values."""
        from PIL import Image

        from glint.preview.export import image_to_uint8, save_image

        image = np.random.default_rng(0).random((3, 4, 3))
        path = save_image(image, tmp_path / "out.png")

        with Image.open(path) as loaded:
            assert loaded.size == (4, 3)
            assert np.array_equal(np.asarray(loaded), image_to_uint8(image))

    def test_no_extension_writes_ppm(self, tmp_path):
        """Test that paths without a suffix become binary PPM."""
        from glint.preview.export import save_image

        path = save_image(np.ones((2, 2, 3)), tmp_path / "image")
        assert path.read_bytes().startswith(b"P6")

    def test_write_stream(self):
        """Test writing PPM to a binary stream."""
        from glint.preview.export import write_stream

        stream = io.BytesIO()
        write_stream(np.zeros((2, 3, 3)), stream)
        data = stream.getvalue()

        assert data.startswith(b"P6")
        # 3 x 2 pixels of RGB bytes after the header
        assert data.endswith(b"\x00" * 18)


class TestRmse:
    """Tests for image comparison."""

    def test_identical_images(self):
        """Test that equal images have zero error."""
        from glint.preview.export import compute_rmse

        image = np.full((2, 2, 3), 0.5)
        assert compute_rmse(image, image) == 0.0

    def test_constant_offset(self):
        """Test a uniform difference."""
        from glint.preview.export import compute_rmse

        assert abs(compute_rmse(np.zeros((2, 2, 3)), np.full((2, 2, 3), 0.1)) - 0.1) < 1e-12

    def test_shape_mismatch_raises(self):
        """Test that differently sized images are rejected."""
        from glint.preview.export import compute_rmse

        with pytest.raises(ValueError, match="shapes must match"):
            compute_rmse(np.zeros((2, 2, 3)), np.zeros((2, 3, 3)))
