"""Convert navigational warning messages into IHO S-124 GML datasets."""

__version__ = "0.1.0"
