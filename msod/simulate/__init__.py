from ._geno import spatial_geno

__all__ = ["spatial_geno"]
