"""Bytecode dispatch analysis.

Derives function selectors from declarations and scans raw instruction
streams for the selector-compare-and-branch idiom.
"""
