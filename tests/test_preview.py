"""Tests for the preview module.

This module tests the preview/display and preview/export functionality including:
- Range scaling (the default tone map)
- Tone mapping functions (Reinhard, exposure)
- Gamma correction
- 8-bit conversion and grayscale collapse
- PNG and PNM export dispatch by file extension
- The Matplotlib preview (with plt.show patched out)
"""

import os
import tempfile

import numpy as np
import pytest
from PIL import Image as PILImage


class TestScaleToRange:
    """Test min/max range scaling."""

    def test_scale_maps_extremes(self):
        """Test that the minimum maps to 0 and the maximum to 1."""
        from phongrt.preview.display import scale_to_range

        image = np.array([[0.01, 0.02], [0.03, 0.05]], dtype=np.float32)
        result = scale_to_range(image)

        assert result.min() == pytest.approx(0.0)
        assert result.max() == pytest.approx(1.0)

    def test_scale_custom_range(self):
        """Test mapping onto [low, high]."""
        from phongrt.preview.display import scale_to_range

        image = np.array([[0.0, 1.0]], dtype=np.float32)
        result = scale_to_range(image, 0.0, 255.0)

        assert np.allclose(result, [[0.0, 255.0]])

    def test_scale_preserves_color_balance(self):
        """Test that channels share one scale factor."""
        from phongrt.preview.display import scale_to_range

        image = np.zeros((1, 2, 3), dtype=np.float32)
        image[0, 1] = (0.04, 0.02, 0.0)
        result = scale_to_range(image)

        assert np.allclose(result[0, 1], (1.0, 0.5, 0.0))

    def test_scale_constant_image(self):
        """Test that a constant image maps to low."""
        from phongrt.preview.display import scale_to_range

        image = np.full((3, 3, 3), 0.2, dtype=np.float32)
        result = scale_to_range(image, 0.25, 1.0)

        assert np.allclose(result, 0.25)


class TestToneMapReinhard:
    """Test Reinhard tone mapping."""

    def test_reinhard_preserves_black(self):
        """Test that Reinhard preserves black (0 -> 0)."""
        from phongrt.preview.display import tone_map_reinhard

        image = np.zeros((10, 10, 3), dtype=np.float32)
        result = tone_map_reinhard(image)

        assert np.allclose(result, 0.0)

    def test_reinhard_compresses_bright_values(self):
        """Test that Reinhard compresses bright HDR values."""
        from phongrt.preview.display import tone_map_reinhard

        image = np.full((10, 10, 3), 10.0, dtype=np.float32)
        result = tone_map_reinhard(image)

        assert np.allclose(result, 10.0 / 11.0)
        assert np.all(result < 1.0)

    def test_reinhard_clamps_negative(self):
        """Test that negative values are treated as zero."""
        from phongrt.preview.display import tone_map_reinhard

        image = np.full((2, 2, 3), -1.0, dtype=np.float32)
        result = tone_map_reinhard(image)

        assert np.allclose(result, 0.0)


class TestToneMapExposure:
    """Test exposure tone mapping."""

    def test_exposure_formula(self):
        """Test 1 - exp(-L * exposure)."""
        from phongrt.preview.display import tone_map_exposure

        image = np.full((2, 2, 3), 0.5, dtype=np.float32)
        result = tone_map_exposure(image, exposure=2.0)

        assert np.allclose(result, 1.0 - np.exp(-1.0))

    def test_higher_exposure_is_brighter(self):
        """Test that exposure brightens the image."""
        from phongrt.preview.display import tone_map_exposure

        image = np.full((2, 2, 3), 0.3, dtype=np.float32)

        assert np.all(tone_map_exposure(image, 4.0) > tone_map_exposure(image, 1.0))


class TestGammaCorrection:
    """Test gamma correction."""

    def test_gamma_one_is_identity(self):
        """Test that gamma 1.0 returns the image unchanged."""
        from phongrt.preview.display import apply_gamma

        image = np.random.rand(4, 4, 3).astype(np.float32)
        result = apply_gamma(image, 1.0)

        assert np.array_equal(result, image)

    def test_gamma_brightens_midtones(self):
        """Test that gamma 2.2 brightens mid-gray."""
        from phongrt.preview.display import apply_gamma

        image = np.full((2, 2, 3), 0.5, dtype=np.float32)
        result = apply_gamma(image, 2.2)

        assert np.allclose(result, 0.5 ** (1.0 / 2.2))

    def test_gamma_preserves_endpoints(self):
        """Test that 0 and 1 are fixed points."""
        from phongrt.preview.display import apply_gamma

        image = np.array([[[0.0, 1.0, 0.0]]], dtype=np.float32)
        result = apply_gamma(image, 2.2)

        assert np.allclose(result, image)


class TestProcessImageForDisplay:
    """Test the full display pipeline."""

    def test_default_uses_scale(self):
        """Test that the default pipeline stretches dim radiance to [0, 1]."""
        from phongrt.preview.display import process_image_for_display

        image = np.zeros((2, 2, 3), dtype=np.float32)
        image[1, 1] = (0.02, 0.02, 0.02)
        result = process_image_for_display(image)

        assert np.allclose(result[1, 1], 1.0)
        assert np.allclose(result[0, 0], 0.0)

    def test_none_clamps(self):
        """Test that "none" only clamps to [0, 1]."""
        from phongrt.preview.display import process_image_for_display

        image = np.array([[[-1.0, 0.5, 3.0]]], dtype=np.float32)
        result = process_image_for_display(image, tone_map="none")

        assert np.allclose(result, [[[0.0, 0.5, 1.0]]])

    def test_unknown_method_raises(self):
        """Test that an unknown tone mapping method raises ValueError."""
        from phongrt.preview.display import process_image_for_display

        with pytest.raises(ValueError):
            process_image_for_display(np.zeros((2, 2, 3), dtype=np.float32), tone_map="filmic")

    def test_output_is_float32(self):
        """Test the output dtype."""
        from phongrt.preview.display import process_image_for_display

        image = np.random.rand(3, 3, 3).astype(np.float32) * 5.0
        result = process_image_for_display(image, tone_map="reinhard", gamma=2.2)

        assert result.dtype == np.float32
        assert result.min() >= 0.0
        assert result.max() <= 1.0


class TestConversion:
    """Test 8-bit conversion helpers."""

    def test_image_to_uint8_truncates(self):
        """Test that conversion truncates rather than rounds."""
        from phongrt.preview.export import image_to_uint8

        image = np.array([[[0.999, 0.5, 0.0]]], dtype=np.float32)
        result = image_to_uint8(image, tone_map="none")

        assert result.dtype == np.uint8
        assert result.tolist() == [[[254, 127, 0]]]

    def test_to_grayscale_weights(self):
        """Test Rec. 709 luminance weights."""
        from phongrt.preview.export import to_grayscale

        image = np.array([[[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [1.0, 1.0, 1.0]]], dtype=np.float32)
        result = to_grayscale(image)

        assert result.shape == (1, 3)
        assert np.allclose(result, [[0.2126, 0.7152, 1.0]], atol=1e-6)

    def test_to_grayscale_passthrough(self):
        """Test that 2D input is returned unchanged."""
        from phongrt.preview.export import to_grayscale

        image = np.ones((2, 3), dtype=np.float32)

        assert to_grayscale(image).shape == (2, 3)


class TestSaveImage:
    """Test format dispatch by file extension."""

    def _gradient(self):
        image = np.zeros((4, 6, 3), dtype=np.float32)
        image[..., 0] = np.linspace(0.0, 0.02, 6)
        return image

    def test_save_png(self):
        """Test PNG export with correct size."""
        from phongrt.preview.export import save_image

        with tempfile.TemporaryDirectory() as tmpdir:
            filepath = os.path.join(tmpdir, "test.png")
            save_image(self._gradient(), filepath)

            assert os.path.exists(filepath)
            with PILImage.open(filepath) as img:
                assert img.size == (6, 4)
                assert img.mode == "RGB"

    def test_save_ppm_is_p3(self):
        """Test that .ppm writes a plain-text P3 file."""
        from phongrt.preview.export import save_image

        with tempfile.TemporaryDirectory() as tmpdir:
            filepath = os.path.join(tmpdir, "test.ppm")
            save_image(self._gradient(), filepath)

            with open(filepath) as f:
                lines = f.read().splitlines()

            assert lines[:3] == ["P3", "6 4", "255"]
            assert len(lines) == 3 + 6 * 4
            # Brightest red channel maps to 255 after scaling
            assert lines[3 + 5] == "255 0 0"

    @pytest.mark.parametrize("extension", [".pgm", ".pbm"])
    def test_save_gray_pnm_is_p2(self, extension):
        """Test that .pgm and .pbm write a plain-text P2 file."""
        from phongrt.preview.export import save_image

        with tempfile.TemporaryDirectory() as tmpdir:
            filepath = os.path.join(tmpdir, "test" + extension)
            save_image(self._gradient(), filepath)

            with open(filepath) as f:
                lines = f.read().splitlines()

            assert lines[:3] == ["P2", "6 4", "255"]
            assert len(lines) == 3 + 4
            values = lines[3].split()
            assert values[0] == "0"
            assert values[-1] == "255"

    def test_unsupported_extension_raises(self):
        """Test that an unknown extension raises ValueError."""
        from phongrt.preview.export import save_image

        with tempfile.TemporaryDirectory() as tmpdir:
            with pytest.raises(ValueError):
                save_image(self._gradient(), os.path.join(tmpdir, "test.jpg"))


class TestShowPreview:
    """Test the Matplotlib preview without opening a window."""

    def test_show_preview_draws_processed_image(self, monkeypatch):
        """Test that the tone-mapped render is drawn and shown once."""
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        from phongrt.camera.pinhole import Camera
        from phongrt.core.renderer import Renderer
        from phongrt.materials.phong import Material
        from phongrt.preview.display import show_preview
        from phongrt.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_plane((0.0, -1.0, 0.0), (0.0, 1.0, 0.0), Material(ambient=(1.0, 1.0, 1.0)))
        scene.add_light((0.0, 5.0, 0.0), ambient=(1.0, 1.0, 1.0), diffuse=(0.0, 0.0, 0.0))
        renderer = Renderer(4, 4)
        renderer.render(scene, Camera())

        calls = []
        monkeypatch.setattr(plt, "show", lambda block=True: calls.append(block))

        show_preview(renderer, block=False)

        assert calls == [False]
        ax = plt.gcf().axes[0]
        assert ax.get_title() == "Render Preview - 4x4, depth 1 (scale)"
        shown = ax.get_images()[0].get_array()
        assert shown.shape == (4, 4, 3)
        assert float(shown.max()) == pytest.approx(1.0)
        plt.close("all")
