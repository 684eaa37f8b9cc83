"""
Skylink Application Layer

This package wires the resolution engine together and exposes it to callers.

Key Components:
- config.py: Environment settings (pydantic-settings) and the stored fallback option
- orchestrator.py: ResolutionOrchestrator, the bridge-first and direct resolution flows
- cli.py: Logging and Sentry setup, and the console entry point

Callers hand the orchestrator a permalink and an emit callback. The callback receives a
ResolutionResult: a URL to open or search for, or a no-op meaning the original link should
be followed.
"""
