"""Composition root for wiring dependencies.

This package centralizes infrastructure-aware wiring so application
services depend on ports without importing adapters directly.
"""
