"""Test package for the trivia game.

This package contains unit tests for the session engine (question
selection, scoring, session state and leaderboard ranking) plus headless
simulations and UI smoke tests.  The UI tests run using pygame's dummy
video driver to avoid opening real windows.  To run these tests, execute
``pytest`` from the project root.
"""
