# pointfit

Local primitive fitting on point clouds, built on NumPy.

`pointfit` fits simple geometric primitives to the neighbourhood of a point
and derives differential quantities from them.

## Modules

- `pointfit.algebraic_sphere`: `AlgebraicSphere`, the implicit field
  `uc + ul·(x - b) + uq·|x - b|²` around a basis center `b`, with
  `potential`, `primitive_gradient`, `project` (closed form),
  `project_descent` (gradient steps), `is_plane`, `pratt_norm` and
  `pratt_norm2`.
- `pointfit.plane`: `Plane`, an implicit hyperplane around a basis center,
  set with `set_plane(direction, position)`, with `potential`, `project`,
  `primitive_gradient`, `is_valid` and approximate equality.
- `pointfit.dry_fit`: `FitResult` (`STABLE`, `UNSTABLE`, `UNDEFINED`,
  `NEED_OTHER_PASS`) and `DryFit`, a fit that only counts its neighbours and
  whose field is zero everywhere.
- `pointfit.covariance_fit`: `CovarianceFit`, a covariance analysis of
  neighbours given relative to an evaluation point (`init`,
  `add_local_neighbor`, `finalize`, `barycenter`, `eigenvalues`,
  `eigenvectors`, `surface_variation`), and `CovarianceFitDer`, which also
  accumulates the derivatives of the covariance matrix from the derivatives of
  each neighbour's weight (`d_cov`). Fewer than three neighbours, or a zero
  total weight, leave the fit `UNDEFINED`.
- `pointfit.monge_patch`: `MongePatch`, a height field
  `h(u, v) = huu u² + hvv v² + huv uv + hu u + hv v + hc` fitted over a
  covariance tangent plane, in 3D only, with `eval_uv`, `potential`,
  `project`, `primitive_gradient`, `world_to_tangent_plane`,
  `tangent_plane_to_world`, `k_mean` and `gaussian_curvature`.
- `pointfit.gls`: `GLSParam`, the Growing Least Squares descriptor
  (`tau`, `eta`, `kappa`), its scale-invariant form (`*_normalized`),
  `fitness` and `compare_to`; and `GLSDer`, the derivatives of the descriptor
  given the derivatives of the sphere coefficients (`dtau`, `deta`, `dkappa`,
  their normalized forms, `dpratt_norm2` and `geom_var`).
- `pointfit.query`: descriptions of neighbour searches: `RangeQuery`
  (radius), `NearestQuery` (single best candidate, `offer`/`get`) and
  `KNearestQuery` (the `k` closest candidates, `push`/`neighbors`), with
  results as `Neighbor(index, squared_distance)`.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example: an algebraic sphere

```python
import numpy as np
from pointfit.algebraic_sphere import AlgebraicSphere

# Unit sphere centred on the origin: -1 + |x|^2 = 0, scaled by 1/2.
sphere = AlgebraicSphere(uc=-0.5, ul=np.zeros(3), uq=0.5, basis_center=np.zeros(3))

q = np.array([2.0, 0.0, 0.0])
print(sphere.potential(q))             # 1.5
print(sphere.project(q))               # [1. 0. 0.]
print(sphere.primitive_gradient(q))    # [2. 0. 0.]
```

## Example: GLS descriptor

```python
from pointfit.gls import GLSParam

gls = GLSParam(sphere, eval_scale=1.0)
print(gls.tau(), gls.kappa(), gls.fitness())   # -0.5 1.0 0.0
```

## Example: a Monge patch

```python
import numpy as np
from pointfit.monge_patch import MongePatch

rng = np.random.default_rng(0)
uv = rng.uniform(-1.0, 1.0, size=(500, 2))
points = np.column_stack([uv, np.zeros(len(uv))])  # samples of the plane z = 0

patch = MongePatch()
patch.init(np.zeros(3))
patch.compute(points, np.ones(len(points)))

print(patch.k_mean(), patch.gaussian_curvature())   # both close to 0
```

`compute` runs the passes the fit asks for: first the plane, then the quadric
over that plane's tangent frame.

## Example: collecting the k nearest candidates

```python
from pointfit.query import KNearestQuery

query = KNearestQuery(input=0, k=2)
for index, d2 in [(1, 4.0), (2, 1.0), (3, 9.0)]:
    query.push(index, d2)
print(query.neighbors())   # [Neighbor(index=2, squared_distance=1.0), Neighbor(index=1, squared_distance=4.0)]
```

## What the package does not do

There is no spatial index: no kd-tree or other structure to search a point
cloud. The query classes only describe a search and collect its results; the
caller finds the candidate neighbours and hands them to the queries and fits.
There are no weight functions or kernels either; weights are plain numbers
passed with each neighbour. The package has no command-line tool.