"""crabgen -- scaffolding for full-stack Rust web projects."""

__version__ = "0.1.0"
