"""
NSE Toolkit Test Suite

Tests for the estimators of the variance of a sample mean, their numerical
building blocks and the ambient configuration layer.
"""
