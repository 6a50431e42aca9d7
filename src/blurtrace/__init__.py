"""Taichi-based Whitted-style ray tracer.

This package renders scenes of spheres and planes lit by point lights, with
support for:
- Diffuse and specular direct lighting with hard shadows
- Recursive mirror reflection up to a fixed depth
- Position-dependent (checkerboard) surfaces
- Spheres that move over time, with motion blur from time-jittered samples
- Supersampled anti-aliasing and frame-by-frame animation output

Subpackages:
    core: Vector and color utilities, the shading loop, sampling and animation
    geometry: Sphere and plane intersection routines
    materials: Uniform and checkerboard surface registry
    scene: Thing and light storage, nearest-hit queries, scene builder, presets
    camera: Look-at camera and ray direction mapping
    preview: PNG and animated GIF export
"""

__version__ = "0.1.0"
