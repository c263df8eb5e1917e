"""triage_server — FastAPI REST API for the triage wizard SDK.

Exposes the DecisionEngine as a stateless HTTP API: clients hold the
session state and post it back with every intent (answer, reset, view).
Nothing is stored server-side.
"""
