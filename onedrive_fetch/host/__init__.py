"""
Host Integration Layer.

This package adapts the pipeline to the environment that runs it.
"""
