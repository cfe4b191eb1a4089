"""Analyzer contract, outcome models and outcome interpretation."""
