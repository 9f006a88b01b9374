"""fallback — deterministic placeholder pattern."""

from seamline.fallback.placeholder import generate_test_pattern, simple_svg

__all__ = ["generate_test_pattern", "simple_svg"]
