"""Front-end pipeline glue for parsing and documentation lookup."""

from .pipeline import FrontEndResult, load_tree, run_frontend

__all__ = ["FrontEndResult", "load_tree", "run_frontend"]
