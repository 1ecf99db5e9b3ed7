"""HTTP adapter over the dialogue engine.

Owns no decision logic: routes parse wire values, call DialogueEngine and
map domain errors onto the ErrorResponse envelope.
"""
