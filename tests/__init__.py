"""
Unit Tests for chess_uci

This package contains unit tests for the process supervisor, the UCI
session, the command builders and reply parsers.

Running Tests:
    # Run all tests
    pytest tests/

    # Run specific test file
    pytest tests/test_session.py

    # Run with coverage
    pytest tests/ --cov=chess_uci --cov-report=html

Tests that need a real engine are skipped when Stockfish is not installed.

Dependencies:
    - pytest: Test framework
    - pytest-cov: Coverage reporting
"""
