"""Core model of a mathematical function plotter: values, equations, functions, plots, constants and editing helpers."""

__version__ = "0.1.0"