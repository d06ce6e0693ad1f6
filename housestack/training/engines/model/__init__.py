#!filepath: housestack/training/engines/model/__init__.py
"""
Concrete ModelTrainEngine implementations.

This module is an organizational namespace only.
Resolve engines through training.engines.registry, do not import them directly.
"""
