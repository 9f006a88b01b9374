"""seamline — garment image and body measurements to a machine-drawable sewing pattern."""

__version__ = "0.1.0"
