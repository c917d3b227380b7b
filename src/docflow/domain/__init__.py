"""Domain layer - document and permission request state machines"""
