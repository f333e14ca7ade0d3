"""Local primitive fitting on point clouds: spheres, planes, covariance, Monge patches, GLS and query descriptions."""

__version__ = "0.1.0"