# probulator

A library for experimenting with low-order lighting representations:
spherical Gaussians (SG) and the hemispherical H-basis, fitted to radiance
samples, plus the small pieces of camera, mesh and shader-source handling that
a probe viewer needs.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install .[test]
pytest
```

## Modules

- `probulator.mathutil`: `sqr`, `cube`, `saturate`, `dot_max0`,
  `dot_saturate`; `make_orthogonal_basis` (3x3 basis with columns
  `b1, b2, n`); lat-long texture coordinates (`cartesian_to_lat_long_texcoord`,
  `lat_long_texcoord_to_cartesian`, `lat_long_texel_area`); spherical angles
  (`spherical_to_cartesian`, `cartesian_to_spherical`); sampling
  (`sample_hammersley`, `sample_halton`, `sample_vogels_sphere`,
  `sample_uniform_sphere`, `sample_uniform_hemisphere`,
  `sample_cosine_hemisphere`); colour (`rgb_luminance`, `rgb_to_ycocg`,
  `ycocg_to_rgb`) and the constants `PI`, `TWO_PI`, `FOUR_PI`.
- `probulator.spherical_gaussian`: the `SphericalGaussian` dataclass (axis
  `p`, sharpness `lam`, RGB amplitude `mu`) with `sg_evaluate`,
  `sg_evaluate_lobe`, `sg_integral`, `sg_dot` (integral of a product of two
  lobes), `sg_cross` (the lobe equal to a product), `sg_cosine_lobe`,
  `sg_find_mu`, `sg_find_mu_matching` and the curve-fitted irradiance
  `sg_irradiance_fitted`.
- `probulator.sg_fit`: the `RadianceSample` dataclass (`direction`, `value`)
  and fits of lobe amplitudes: `sg_fit_least_squares` (unconstrained) and
  `sg_fit_nn_least_squares` (non-negative, per colour channel). Both return new
  lobes and leave the input untouched.
- `probulator.sg_genetic`: `sg_fit_genetic_algorithm(basis, samples,
  population_count, generation_count, seed=0, verbose=False)`, which evolves
  amplitudes and sharpness with a seeded genetic algorithm (one elite,
  crossover and Gaussian mutation); `sg_basis_error`, the luminance-weighted
  mean square error it minimises; and `parallel_for`, which runs a function
  over a range of indices on a shared thread pool.
- `probulator.sg_experiment`: `SgExperiment`, which lays out `lobe_count`
  lobes on a golden spiral (plus an optional ambient lobe), solves for their
  amplitudes with an `SgSolver` (`NAIVE`, `RUNNING_AVERAGE`, `LEAST_SQUARES`,
  `NON_NEGATIVE_LEAST_SQUARES` or `GENETIC_ALGORITHM`, the last seeded by the
  non-negative fit) and reconstructs radiance and irradiance. `run(samples,
  directions)` returns RGBA radiance and irradiance arrays for any array of
  directions. Irradiance uses an SG BRDF when `brdf_lambda > 0`, otherwise the
  curve fit. Also exported: `sg_basis_evaluate`, `sg_basis_dot`,
  `sg_basis_irradiance_fitted` and `solve_running_average`.
- `probulator.hbasis`: `h_evaluate(p, order)` for orders 1, 4 and 6 (zero on
  the lower hemisphere), `h_evaluate4`, `h_evaluate6`, `h_dot`,
  `h_add_weighted`, `h_mean_square_error` and `h_mean_square_error_scalar`.
- `probulator.distribution`: `DiscreteDistribution`, alias-method sampling of
  indices in proportion to weights, drawing from a `random.Random`.
- `probulator.variance`: `OnlineVariance`, Welford's running mean and sample
  variance for scalars or arrays.
- `probulator.camera`: `Camera` (projection and view matrices, rotation,
  view- and world-space movement), `CameraMode` (`ORBIT`, `FIRST_PERSON`),
  `InputState` and `CameraController`, whose `update` applies one frame of
  input and whose `interpolate` blends two cameras with spherical
  interpolation of orientation.
- `probulator.sphere_mesh`: `generate_sphere(u_slices=256, v_slices=192)`
  building a UV sphere `Mesh` of `Vertex` objects, `compute_vertex_normals`
  for smooth normals of an indexed triangle list, and `mesh_bounds`.
- `probulator.shader_source`: `preprocess_shader_from_file`, which expands
  `#include "..."` / `#include <...>` lines relative to the including file and
  follows each with a `#line` directive; `path_from_filename`;
  `CommonShaderUniforms` and `common_uniform_values`, which maps uniform names
  (`uElapsedTime`, `uExposure`, ...) to their values.
- `probulator.change_monitor`: `ChangeMonitor(path, recursive=False)`, which
  polls a directory and whose `update()` returns `True` when a file is newer
  than at the previous check (new files count as changed).

## Example

```python
from probulator.mathutil import sample_uniform_sphere, sample_hammersley
from probulator.sg_fit import RadianceSample
from probulator.sg_experiment import SgExperiment, SgSolver

samples = []
for i in range(2000):
    direction = sample_uniform_sphere(*sample_hammersley(i, 2000))
    brightness = max(0.0, direction[2])
    samples.append(RadianceSample(direction, (brightness, brightness, brightness)))

experiment = SgExperiment(solver=SgSolver.LEAST_SQUARES, lobe_count=12, lam=6.0)
experiment.generate_lobes()
experiment.solve(samples)

print(experiment.radiance((0.0, 0.0, 1.0)))
print(experiment.irradiance((0.0, 0.0, 1.0)))
```

## What it does not do

This is a library only. It has no command-line program and no interactive
viewer. It does not read HDR environment maps or OBJ models, does not write
images or comparison reports, and does not draw anything: camera matrices,
sphere meshes, shader text and uniform values are produced for you to pass to
a renderer of your own. Radiance samples must be supplied by the caller.