"""
sdkgen - generate SDK code from an introspected API schema.
"""

__version__ = "0.1.0"
