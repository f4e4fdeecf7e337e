"""assetmin - combine, compact and version-stamp JS/CSS assets."""

__version__ = "0.1.0"
