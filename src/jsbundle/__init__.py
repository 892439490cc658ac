"""jsbundle - Selective bundler for single-export JavaScript source trees."""

__version__ = "0.1.0"
