"""Test suite for glitchfx.

Test Structure:
- unit/: Unit tests for individual components
  - effects/: shake, glitch strips, typewriter, drift and effect handles
  - composition/: chains, the composer and composed sequences
  - scheduling/: simulated and asyncio schedulers
  - surface/: in-memory surface and overlay nodes
  - config/: configuration models and preset loading
  - utils/: logging, math and random sources
- conftest.py: Shared fixtures and test configuration
"""
