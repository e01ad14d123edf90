"""Taichi-based Whitted-style ray tracer with Phong shading.

This package renders scenes of spheres and infinite planes lit by point
lights, with support for:
- Phong shading (ambient, diffuse, specular) with distance attenuation
- Hard shadows from shadow rays
- Bounded recursive mirror reflection
- Tone-mapped PNG and plain-text PNM output

Subpackages:
    core: Ray utilities, shading, the tracing integrator and the Renderer
    geometry: Sphere and plane primitives with intersection tests
    materials: Phong material model
    scene: Surface and light storage, SceneManager and the demo scene
    camera: Pinhole camera with ray generation
    preview: Image sink, tone mapping and file export
"""

__version__ = "0.1.0"
