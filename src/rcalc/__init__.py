"""Remote arithmetic over UDP.

A client sends a fixed 20-byte request naming a function (multiply, divide)
and two unsigned 32-bit operands; the server answers with a response carrying
the result, or an error packet carrying an error code.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
