"""
Unit Tests for Banqi Engine

This package contains unit tests for all engine components.

Running Tests:
    # Run all tests
    pytest tests/

    # Run specific test file
    pytest tests/test_movegen.py

    # Run with coverage
    pytest tests/ --cov=banqi_engine --cov-report=html

    # Run specific test
    pytest tests/test_movegen.py::TestCannon::test_screened_capture

Dependencies:
    - pytest: Test framework
    - pytest-cov: Coverage reporting
"""
