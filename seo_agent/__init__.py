"""SEO content agent: topic in, SEO-optimized markdown article out."""

__version__ = "0.1.0"
