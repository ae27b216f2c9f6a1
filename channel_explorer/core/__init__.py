"""Core building blocks: settings, exceptions, pagination primitives."""
