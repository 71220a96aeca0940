"""
Test suite for the inspectdoc project.
"""
