"""Test suite package marker to ensure deterministic module names."""

# Package semantics give nested modules fully qualified names such as
# ``tests.zi_wei.test_pipeline`` so similarly named modules never shadow each other.
