"""Core scan -> parse -> evaluate pipeline. Nothing in this package prints; failures are raised or collected as the
LoxErrors defined in lox.lang.error, which alone decides how they are reported.
"""
