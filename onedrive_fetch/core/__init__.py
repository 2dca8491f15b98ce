"""
Core application engine.

The `FetchPipeline` coordinates a single run, delegating each step to the API
and transfer layers.
"""
