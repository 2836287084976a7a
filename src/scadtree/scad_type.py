"""Conversion of Python values to OpenScad literals.

Every value that can appear as an argument in a generated script is rendered
through render_value(). The rules match the OpenScad grammar exactly:

* floats are written in the shortest form that round trips as a float32
  (1.0 -> 1, 3.3 -> 3.3, -5.0 -> -5), never in scientific notation.
* numpy vectors of 2, 3 or 4 components render as [x,y] etc.
* lists and tuples render as OpenScad list literals with a comma after every
  element, e.g. [1,2,3,]. An empty list renders as [].
* None renders as undef.
"""

from numbers import Integral, Real

import numpy as np

from scadtree.modifier import ScadBaseException


class NonFiniteValue(ScadBaseException):
    """A NaN or infinite number has no OpenScad literal."""


class UnsupportedValueType(ScadBaseException):
    """The value has no OpenScad literal representation."""


class StringWriter(object):
    """A writer that collects text fragments into a string. This API can be
    implemented for file writers or other uses."""

    def __init__(self):
        self._builder = []

    def get(self):
        """Returns the contents."""
        return ''.join(self._builder)

    def append(self, text):
        """Called by render_value() to write the generated representation."""
        self._builder.append(text)


VECTOR_SIZES = (2, 3, 4)

_STRING_ESCAPES = {
    '"': '\\"',
    '\\': '\\\\',
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
    '\0': '\\0',
}


def vec2(x, y):
    """Returns a float32 2-vector."""
    return np.array((x, y), dtype=np.float32)


def vec3(x, y, z):
    """Returns a float32 3-vector."""
    return np.array((x, y, z), dtype=np.float32)


def vec4(x, y, z, w):
    """Returns a float32 4-vector."""
    return np.array((x, y, z, w), dtype=np.float32)


def format_float(value):
    """Returns the minimal positional text of value as a float32.
    Throws:
        NonFiniteValue if the value is NaN or infinite.
    """
    f32 = np.float32(value)
    if not np.isfinite(f32):
        raise NonFiniteValue('%r cannot be represented in OpenScad' % (value,))
    return np.format_float_positional(f32, unique=True, trim='-')


def quote_string(value):
    """Returns value double quoted with quotes, backslashes and control
    characters escaped."""
    parts = ['"']
    for c in value:
        escaped = _STRING_ESCAPES.get(c)
        if escaped is None and (ord(c) < 0x20 or ord(c) == 0x7f):
            escaped = '\\u{%x}' % ord(c)
        parts.append(c if escaped is None else escaped)
    parts.append('"')
    return ''.join(parts)


def render_vector(value, writer):
    writer.append('[')
    writer.append(','.join(format_float(v) for v in value))
    writer.append(']')


def render_sequence(value, writer):
    writer.append('[')
    for elem in value:
        render_value(elem, writer)
        writer.append(',')
    writer.append(']')


def render_value(value, writer):
    """Writes the OpenScad literal for value to writer.
    Args:
        value: The value to render.
        writer: An object with an append(str) method, like StringWriter.
    Throws:
        NonFiniteValue for NaN and infinite numbers.
        UnsupportedValueType if the value has no OpenScad representation.
    """
    if hasattr(value, 'fmt_code'):
        value.fmt_code(writer)
    elif value is None:
        writer.append('undef')
    elif isinstance(value, (bool, np.bool_)):
        # bool is an Integral so this must come first.
        writer.append('true' if value else 'false')
    elif isinstance(value, Integral):
        writer.append(str(int(value)))
    elif isinstance(value, Real):
        writer.append(format_float(value))
    elif isinstance(value, str):
        writer.append(quote_string(value))
    elif isinstance(value, np.ndarray):
        if value.ndim != 1 or len(value) not in VECTOR_SIZES:
            raise UnsupportedValueType(
                'expected a vector of %r components but got shape %r'
                % (VECTOR_SIZES, value.shape))
        render_vector(value, writer)
    elif isinstance(value, (list, tuple)):
        render_sequence(value, writer)
    else:
        raise UnsupportedValueType(
            'no OpenScad representation for "%r" of type %s'
            % (value, value.__class__.__name__))


def get_code(value):
    """Returns the OpenScad literal for value as a string."""
    writer = StringWriter()
    render_value(value, writer)
    return writer.get()
