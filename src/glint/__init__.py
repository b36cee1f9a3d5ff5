"""glint: a Whitted-style ray tracer.

This package renders textual scene descriptions into raster images by casting
rays from an eye point through an image plane, with support for:
- Phong shading (ambient, diffuse, specular) with hard shadows
- Recursive mirror reflection bounded by a bounce budget
- Spheres and smooth-shaded triangles under arbitrary affine transforms
- Stratified and jittered supersampling
- A compiled Taichi renderer for large images

Subpackages:
    core: Vector math, transforms, integrator, sampler and Taichi kernels
    geometry: Shape primitives and bounding boxes
    materials: Phong material model
    scene: Scene container, lights, intersector and file loaders
    preview: Tone mapping and image export
"""

__version__ = "0.1.0"
