"""Tests for the render_scene command-line script.

Tests cover:
- Argument defaults
- Rendering a scene file to PNG
- Binary PPM on standard output
- Exit status for bad or missing scene files

Only the NumPy renderer is exercised here; --kernel re-initializes Taichi.
"""

from pathlib import Path

SCENES_DIR = Path(__file__).resolve().parent.parent / "examples" / "scenes"


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self):
        """Test the default options."""
        from examples.render_scene import parse_args

        args = parse_args([])

        assert args.scene is None
        assert tuple(args.size) == (700, 700)
        assert args.output is None
        assert args.samples is None
        assert args.jitter_seed is None
        assert args.bounces == 5
        assert args.tone_map == "none"
        assert args.gamma == 1.0
        assert not args.kernel


class TestMain:
    """Tests for the main() entry point."""

    def test_render_to_png(self, tmp_path):
        """Test rendering an example scene into a PNG file."""
        from PIL import Image

        from examples.render_scene import main

        output = tmp_path / "spheres.png"
        status = main([str(SCENES_DIR / "spheres.scn"), "--size", "4", "3", "-o", str(output), "--quiet"])

        assert status == 0
        with Image.open(output) as image:
            assert image.size == (4, 3)

    def test_ppm_to_stdout(self, tmp_path, capsysbinary):
        """Test that without --output a PPM goes to standard output."""
        from examples.render_scene import main

        scene = tmp_path / "ball.scn"
        scene.write_text("lta 1 1 1\nmat 1 0 0  0 0 0  0 0 0 1  0 0 0\nsph 0 0 -5 1\n")

        status = main([str(scene), "--size", "2", "2", "--samples", "2", "--jitter-seed", "3", "--quiet"])
        out = capsysbinary.readouterr().out

        assert status == 0
        assert out.startswith(b"P6")
        assert len(out) > 2 * 2 * 3

    def test_bad_scene_returns_error(self, tmp_path):
        """Test that scene errors give exit status 1."""
        from examples.render_scene import main

        scene = tmp_path / "bad.scn"
        scene.write_text("sph 0 0\n")

        assert main([str(scene), "--size", "2", "2", "-o", str(tmp_path / "x.png"), "--quiet"]) == 1
        assert not (tmp_path / "x.png").exists()

    def test_missing_scene_returns_error(self, tmp_path):
        """Test that an unreadable scene file gives exit status 1."""
        from examples.render_scene import main

        assert main([str(tmp_path / "missing.scn"), "--quiet"]) == 1
