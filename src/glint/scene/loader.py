"""Scene description loader.

A scene file holds one command per line. ``#`` starts a comment and blank
lines are ignored. Vectors and colors are written as three numbers.

    cam  eye ll lr ul ur        camera: eye and image-plane corners
    xfz                         reset the current transform
    xft  t                      append a translation
    xfs  s                      append an axis scale (no zero factors)
    xfr  r                      append a rotation of |r| degrees about r
    lta  color                  ambient light
    ltd  dir color              directional light
    ltp  pos color [falloff]    point light, falloff 0, 1 or 2
    mat  ka kd ks p kr          set the current material
    sph  center radius          sphere
    tri  v0 v1 v2               triangle with face normals
    obj  filename               OBJ mesh, relative to the scene file

Every transform command multiplies onto the right of the current transform,
so the command written last is applied to the geometry first. Objects take
the current material and transform when they are declared; the transform is
baked into primitives that support it.

Problems are reported per line. Warnings (unknown commands, extra
arguments, objects with the default material, transformed cameras or
lights) are logged and loading continues. Errors are logged as well and
collected; once the whole file has been read they are raised together as a
SceneParseError.

Example:
    >>> from glint.scene.loader import load_scene
    >>> scene = load_scene("examples/scenes/spheres.scn")
    >>> len(scene.objects)
    5
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from glint.core.ray import Vec, as_vec
from glint.core.transform import AffineTransform
from glint.geometry import Primitive, Sphere, Triangle
from glint.materials import DEFAULT_MATERIAL, Material
from glint.scene.index import AllObjectsIndex
from glint.scene.lights import AmbientLight, DirectionalLight, LightSource, PointLight
from glint.scene.obj_mesh import load_obj
from glint.scene.scene import Camera, IndexFactory, Scene, SceneObject

logger = logging.getLogger(__name__)


class SceneParseError(ValueError):
    """Raised when a scene file contains errors.

    Attributes:
        filename: Name of the scene file.
        errors: (line number, message) for every error in the file.
    """

    def __init__(self, filename: str, errors: list[tuple[int, str]]) -> None:
        self.filename = filename
        self.errors = errors
        details = "\n".join(f"  {filename}:{line}: {message}" for line, message in errors)
        super().__init__(f"{len(errors)} error(s) in {filename}:\n{details}")


class _Arguments:
    """Cursor over the argument tokens of one command."""

    def __init__(self, tokens: list[str]) -> None:
        self._tokens = tokens
        self._position = 0

    def _next(self, what: str) -> str:
        if self._position >= len(self._tokens):
            raise ValueError(f"Missing argument: expected {what}")
        token = self._tokens[self._position]
        self._position += 1
        return token

    def next_float(self) -> float:
        token = self._next("a number")
        try:
            return float(token)
        except ValueError:
            raise ValueError(f"Invalid number '{token}'") from None

    def next_vec3(self) -> Vec:
        return as_vec([self.next_float() for _ in range(3)])

    def next_int(self, default: int) -> int:
        if self._position >= len(self._tokens):
            return default
        token = self._next("an integer")
        try:
            return int(token)
        except ValueError:
            raise ValueError(f"Invalid integer '{token}'") from None

    def next_string(self) -> str:
        return self._next("a name")

    def remaining(self) -> list[str]:
        return self._tokens[self._position :]


class SceneLoader:
    """Builds a Scene by executing scene-file commands one line at a time.

    Args:
        filename: Name used in messages.
        directory: Directory that relative OBJ paths are resolved against.
        index_factory: Builds the scene's candidate index.
    """

    def __init__(
        self,
        filename: str = "<string>",
        directory: str | Path = ".",
        index_factory: IndexFactory = AllObjectsIndex,
    ) -> None:
        self.filename = filename
        self.directory = Path(directory)
        self.index_factory = index_factory

        self.camera = Camera()
        self.lights: list[LightSource] = []
        self.objects: list[SceneObject] = []

        self.material = DEFAULT_MATERIAL
        self.transform = AffineTransform.identity()

        self.default_camera = True
        self.default_material = True
        self.errors: list[tuple[int, str]] = []
        self.warnings: list[tuple[int, str]] = []

        self._commands: dict[str, Callable[[_Arguments, int], None]] = {
            "cam": self._camera,
            "xfz": self._reset_transform,
            "xft": self._translate,
            "xfs": self._scale,
            "xfr": self._rotate,
            "lta": self._ambient_light,
            "ltd": self._directional_light,
            "ltp": self._point_light,
            "mat": self._set_material,
            "sph": self._sphere,
            "tri": self._triangle,
            "obj": self._mesh,
        }

    # -------------------------------------------------------------------------
    # Reporting
    # -------------------------------------------------------------------------

    def _warn(self, line_number: int, message: str) -> None:
        self.warnings.append((line_number, message))
        logger.warning("%s:%d: %s", self.filename, line_number, message)

    def _error(self, line_number: int, message: str) -> None:
        self.errors.append((line_number, message))
        logger.error("%s:%d: %s", self.filename, line_number, message)

    # -------------------------------------------------------------------------
    # Driver
    # -------------------------------------------------------------------------

    def execute(self, line: str, line_number: int) -> None:
        """Execute one line of a scene file."""
        tokens = line.split("#", 1)[0].split()
        if not tokens:
            return

        command = self._commands.get(tokens[0])
        if command is None:
            self._warn(line_number, f"Unsupported command '{tokens[0]}'")
            return

        args = _Arguments(tokens[1:])
        try:
            command(args, line_number)
        except (ValueError, OSError) as exc:
            self._error(line_number, str(exc))
            return

        extra = args.remaining()
        if extra:
            self._warn(line_number, f"Extraneous arguments '{' '.join(extra)}'")

    def load_lines(self, lines) -> Scene:
        """Execute every line and build the scene.

        Raises:
            SceneParseError: If any line had an error.
        """
        line_number = 0
        for line_number, line in enumerate(lines, start=1):
            self.execute(line, line_number)

        if self.errors:
            raise SceneParseError(self.filename, self.errors)
        if self.default_camera:
            self._warn(line_number, "Using default camera")

        scene = Scene(
            camera=self.camera,
            lights=self.lights,
            objects=self.objects,
            index_factory=self.index_factory,
        )
        logger.info(
            "Loaded %s: %d objects, %d lights", self.filename, len(self.objects), len(self.lights)
        )
        return scene

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def _warn_if_transformed(self, line_number: int, what: str) -> None:
        if not self.transform.is_identity:
            self._warn(line_number, f"Transformations do not apply to {what}")

    def _camera(self, args: _Arguments, line_number: int) -> None:
        self._warn_if_transformed(line_number, "cameras")
        corners = [args.next_vec3() for _ in range(5)]
        self.camera = Camera(*corners)
        self.default_camera = False

    def _reset_transform(self, args: _Arguments, line_number: int) -> None:
        self.transform = AffineTransform.identity()

    def _translate(self, args: _Arguments, line_number: int) -> None:
        self.transform = self.transform.compose(AffineTransform.translation(args.next_vec3()))

    def _scale(self, args: _Arguments, line_number: int) -> None:
        factors = args.next_vec3()
        self.transform = self.transform.compose(AffineTransform.scaling(*factors))

    def _rotate(self, args: _Arguments, line_number: int) -> None:
        self.transform = self.transform.compose(
            AffineTransform.rotation_degrees(args.next_vec3())
        )

    def _ambient_light(self, args: _Arguments, line_number: int) -> None:
        self.lights.append(AmbientLight(args.next_vec3()))

    def _directional_light(self, args: _Arguments, line_number: int) -> None:
        self._warn_if_transformed(line_number, "lights")
        direction = args.next_vec3()
        color = args.next_vec3()
        self.lights.append(DirectionalLight(direction, color))

    def _point_light(self, args: _Arguments, line_number: int) -> None:
        self._warn_if_transformed(line_number, "lights")
        position = args.next_vec3()
        color = args.next_vec3()
        falloff = args.next_int(default=0)
        self.lights.append(PointLight(position, color, falloff))

    def _set_material(self, args: _Arguments, line_number: int) -> None:
        self.material = Material(
            ambient=args.next_vec3(),
            diffuse=args.next_vec3(),
            specular=args.next_vec3(),
            specular_power=args.next_float(),
            reflective=args.next_vec3(),
        )
        self.default_material = False

    def _add(self, primitives: list[Primitive], line_number: int) -> None:
        if self.default_material:
            self._warn(line_number, "Using default material for object")
        for primitive in primitives:
            self.objects.append(SceneObject.create(primitive, self.material, self.transform))

    def _sphere(self, args: _Arguments, line_number: int) -> None:
        center = args.next_vec3()
        radius = args.next_float()
        self._add([Sphere(center, radius)], line_number)

    def _triangle(self, args: _Arguments, line_number: int) -> None:
        vertices = [args.next_vec3() for _ in range(3)]
        self._add([Triangle.from_vertices(*vertices)], line_number)

    def _mesh(self, args: _Arguments, line_number: int) -> None:
        path = self.directory / args.next_string()
        self._add(load_obj(path), line_number)


def load_scene_text(
    text: str,
    filename: str = "<string>",
    directory: str | Path = ".",
    index_factory: IndexFactory = AllObjectsIndex,
) -> Scene:
    """Build a scene from scene-file text.

    Args:
        text: The scene description.
        filename: Name used in messages.
        directory: Directory that relative OBJ paths are resolved against.
        index_factory: Builds the scene's candidate index.

    Returns:
        The loaded scene.

    Raises:
        SceneParseError: If the text contains errors.
    """
    loader = SceneLoader(filename, directory, index_factory)
    return loader.load_lines(text.splitlines())


def load_scene(path: str | Path, index_factory: IndexFactory = AllObjectsIndex) -> Scene:
    """Load a scene file.

    Args:
        path: Path to the scene file.
        index_factory: Builds the scene's candidate index.

    Returns:
        The loaded scene.

    Raises:
        OSError: If the file cannot be read.
        SceneParseError: If the file contains errors.
    """
    scene_path = Path(path)
    text = scene_path.read_text(encoding="utf-8")
    return load_scene_text(text, str(scene_path), scene_path.parent, index_factory)
