"""scadtree is a thin layer API for generating OpenSCAD scripts.

Models are trees of ScadObject nodes, each wrapping exactly one ScadElement
(an OpenSCAD primitive, transform or boolean combinator). This module holds
the machinery the elements are declared with:
* Arg and OpenScadApiSpecifier describe each element's arguments
* converters check and normalize constructor arguments
* CodeDumper writes the generated script with OpenScad block structure

See:
    `OpenSCAD <http://www.openscad.org/documentation.html>`
    `PythonOpenScad <https://github.com/owebeeone/pythonopenscad>`

License:

Copyright (C) 2025 Gianni Mariani

This library is free software; you can redistribute it and/or
modify it under the terms of the GNU Lesser General Public
License as published by the Free Software Foundation; either
version 2.1 of the License, or (at your option) any later version.

This library is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
Lesser General Public License for more details.

You should have received a copy of the GNU Lesser General Public
License along with this library; if not, write to the Free Software
Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA  02110-1301  USA
"""

from dataclasses import dataclass, field
from numbers import Integral, Real
from typing import ClassVar, Tuple

import numpy as np

from scadtree.modifier import ScadBaseException
from scadtree.scad_type import StringWriter, get_code


class ConversionException(ScadBaseException):
    """Exception for conversion errors."""


class RequiredParameterNotProvided(ScadBaseException):
    """Exception when a required parameter is not provided."""


class InitializerNotAllowed(ScadBaseException):
    """An initializer (def __init__) was defined and is not allowed."""


class InvalidIndentLevel(ScadBaseException):
    """Indentation level was set to an invalid number."""


class IndentLevelStackEmpty(ScadBaseException):
    """Indentation level stack was popped while empty."""


class InvalidValueForBool(ScadBaseException):
    """Conversion failure for bool value."""


class InvalidValueForStr(ScadBaseException):
    """Conversion failure for str value."""


class InvalidValue(ScadBaseException):
    """Invalid value provided.."""


class ColorOutOfRange(ScadBaseException, AssertionError):
    """A color component is outside [0, 1]. This is a programming error at the
    call site, not a condition to recover from."""


class DuplicateNamingOfArgs(ScadBaseException):
    """OpenScadApiSpecifier args has names used more than once."""


class NameCollissionFieldNameReserved(ScadBaseException):
    """An attempt to define an arg with the same name as a field."""


# How an argument is written inside the call parentheses.
NAMED = '%s=%s'
SPACED = ' %s = %s'


class Arg(object):
    """Defines an argument and field for scadtree ScadElement based APIs."""

    def __init__(
        self,
        name,
        typ,
        default_value,
        docstring,
        required=False,
        osc_name=None,
        init=True,
        compare=True,
        positional=False,
        name_value_format=NAMED,
    ):
        """Args:
        name: The scadtree name of this parameter.
        osc_name: The name used by OpenScad. Defaults to name. For KeywordValue
            arguments this is the suffix appended to the value's keyword.
        typ: The converter for the argument.
        default_value: Default value for argument (this will be converted by typ).
        docstring: The python doc for the arg.
        required: Throws if the value is not provided.
        init: If True then the arg is added to the __init__ function.
        compare: If True then the arg is compared in the equals function.
        positional: If True only the value is rendered, without a name.
        name_value_format: The format used to render a named argument.
        """
        self.name = name
        self.osc_name = name if osc_name is None else osc_name
        self.typ = typ
        self.default_value = default_value
        self.docstring = docstring
        self.required = required
        self.init = init
        self.compare = compare
        self.positional = positional
        self.name_value_format = name_value_format

    def to_dataclass_field(self):
        kwds = dict()
        if not self.required:
            kwds['default'] = self.default_value
        if not self.init:
            kwds['init'] = False
        if not self.compare:
            kwds['compare'] = False
        return field(**kwds)

    def annotation(self):
        return (self.name, self.typ)

    def default_value_str(self):
        """Returns the default value as a string otherwise '' if no default provided."""
        if self.default_value is None:
            return ''
        return repr(self.default_value)

    def document(self):
        "Returns formatted documentation for this arg."
        default_str = self.default_value_str()
        default_str = (' Default ' + default_str) if default_str else default_str
        if self.positional or self.name == self.osc_name:
            return '%s: %s%s' % (self.name, self.docstring, default_str)
        return '%s (converts to %s): %s%s' % (
            self.name,
            self.osc_name,
            self.docstring,
            default_str,
        )


@dataclass(frozen=True)
class _ConverterWrapper:
    func: object

    def __repr__(self):
        return self.func.__name__

    def __str__(self):
        return self.func.__name__

    def __call__(self, v):
        return self.func(v)

    @property
    def __name__(self):
        return self.func.__name__


def _as_converter(arg=None):
    if isinstance(arg, str):

        def decorator(f):
            f.__name__ = arg
            return _ConverterWrapper(f)

        return decorator
    return _ConverterWrapper(arg)


# Errors a converter may raise when given a value it can't convert.
CONVERSION_ERRORS = (ScadBaseException, ValueError, TypeError)


def list_of(typ, len_min_max=(0, 0)):
    """Defines a converter for an iterable to a list of elements of a given type.
    Args:
        typ: The type of list elements.
        len_min_max: A tuple of the (min,max) length, (0, 0) indicates no limits.
    Returns:
        A function that performs the conversion.
    """
    description = 'list_of(%s, len_min_max=%r)' % (typ.__name__, len_min_max)

    @_as_converter(description)
    def list_converter(value):
        """Converts provided value as a list of the given type.
        value: The value to be converted
        """
        if isinstance(value, (str, bytes)):
            raise ConversionException('expected a list but got the string %r' % (value,))
        converted_value = []
        for v in value:
            if len_min_max[1] and len(converted_value) >= len_min_max[1]:
                raise ConversionException('provided length too large, max is %d' % len_min_max[1])
            converted_value.append(typ(v))
        if len_min_max[0] and len(converted_value) < len_min_max[0]:
            raise ConversionException(
                'provided length (%d) too small, min is %d'
                % (len(converted_value), len_min_max[0])
            )
        return converted_value

    return list_converter


def vector_of(size, fill_to_min=None):
    """Defines a converter for an iterable of numbers to a float32 numpy vector.
    Args:
        size: The number of components.
        fill_to_min: If the provided iterable is too short then use this value.
    Returns:
        A function that performs the conversion.
    """
    description = 'vector_of(%d, fill_to_min=%r)' % (size, fill_to_min)

    @_as_converter(description)
    def vector_converter(value):
        """Converts provided value to a float32 vector."""
        array = np.asarray(value, dtype=np.float64)
        if array.ndim != 1:
            raise ConversionException(
                'expected a sequence of numbers but got "%r"' % (value,))
        components = [float(v) for v in array]
        if len(components) > size:
            raise ConversionException('provided length too large, max is %d' % size)
        if len(components) < size:
            if fill_to_min is None:
                raise ConversionException(
                    'provided length (%d) too small and fill_to_min is None, min is %d'
                    % (len(components), size)
                )
            components.extend([fill_to_min] * (size - len(components)))
        return np.array(components, dtype=np.float32)

    return vector_converter


def one_of(typ, *args):
    """Provides a converter that will iterate over the provided converters until it succeeds.
    Args:
      typ: The first converter argument.
      args: A list of supplemental type argument converters.
    """
    largs = [typ] + list(args)
    description = 'one_of(%s)' % ', '.join(t.__name__ for t in largs)

    @_as_converter(description)
    def one_of_converter(value):
        """Converts a value to one of the list provided to one_of().
        Throws:
          ConversionException if the value failed all conversions."""
        for atyp in largs:
            try:
                return atyp(value)
            except CONVERSION_ERRORS:
                continue
        raise ConversionException("The value %r can't convert using %s" % (value, description))

    return one_of_converter


@_as_converter
def bool_strict(value):
    """Returns the given value if it is a bool.
    Args:
        value: A boolean value.
    Throws:
        InvalidValueForBool if the provided value is not a bool.
    """
    if not isinstance(value, (bool, np.bool_)):
        raise InvalidValueForBool(
            'expected a bool value but got "%r" of type %s' % (value, value.__class__.__name__)
        )
    return bool(value)


@_as_converter
def str_strict(value):
    """Returns the given value if it is a str object otherwise raises
    InvalidValueForStr exception.
    Args:
        value: A string value.
    Throws:
        InvalidValueForStr if the provided value is not a str.
    """
    if not isinstance(value, str):
        raise InvalidValueForStr(
            'expected a string value but got "%r" of type %s' % (value, value.__class__.__name__)
        )
    return value


@_as_converter
def int_strict(value):
    """Returns the given value if it is an Integral object.
    Throws:
        ValueError if the provided value is not an integer.
    """
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, Integral):
        raise ValueError(
            f'expected an integer value but got "{value!r}" of type {value.__class__.__name__}')
    return int(value)


@_as_converter
def uint_strict(value):
    """Returns the given value if it is a non negative integer.
    Throws:
        InvalidValue if the value is negative.
    """
    value = int_strict(value)
    if value < 0:
        raise InvalidValue(f'expected a non negative integer but got {value}')
    return value


@_as_converter
def float_strict(value):
    """Returns the given number as a float.
    Throws:
        ValueError if the provided value is not a real number.
    """
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, Real):
        raise ValueError(
            f'expected a number but got "{value!r}" of type {value.__class__.__name__}')
    return float(value)


def check_unit_interval(value, what='color'):
    """Checks every component of value lies in [0, 1].
    Throws:
        ColorOutOfRange if any component is outside the interval.
    """
    for component in value:
        if not 0.0 <= component <= 1.0:
            raise ColorOutOfRange(
                '%s component %r of %r is not in the range [0, 1]'
                % (what, float(component), [float(v) for v in value])
            )
    return value


def unit_vector_of(size):
    """Defines a converter to a float32 vector with all components in [0, 1]."""
    vector_converter = vector_of(size)

    @_as_converter('unit_vector_of(%d)' % size)
    def unit_vector_converter(value):
        return check_unit_interval(vector_converter(value))

    return unit_vector_converter


@dataclass(frozen=True)
class KeywordValue:
    """A number whose OpenScad argument name is chosen by its type, like
    r=10 versus d=10."""

    KEYWORD: ClassVar[str] = ''
    value: float

    def __post_init__(self):
        object.__setattr__(self, 'value', float_strict(self.value))


@dataclass(frozen=True)
class Radius(KeywordValue):
    """A circular size given as a radius."""

    KEYWORD: ClassVar[str] = 'r'


@dataclass(frozen=True)
class Diameter(KeywordValue):
    """A circular size given as a diameter."""

    KEYWORD: ClassVar[str] = 'd'


@dataclass(frozen=True)
class Delta(KeywordValue):
    """A straight line offset distance."""

    KEYWORD: ClassVar[str] = 'delta'


def keyword_of(*classes):
    """Returns a converter accepting only instances of the given KeywordValue classes."""
    description = 'keyword_of(%s)' % ', '.join(c.__name__ for c in classes)

    @_as_converter(description)
    def keyword_converter(value):
        if not isinstance(value, classes):
            raise ConversionException(
                'expected one of %s but got "%r"' % (description, value))
        return value

    return keyword_converter


# Often used converters.
VECTOR2_F32 = vector_of(2)
VECTOR3_F32 = vector_of(3)
VECTOR4_F32 = vector_of(4)
VECTOR3_F32_FILL_0 = vector_of(3, fill_to_min=0.0)
UNIT_VECTOR3 = unit_vector_of(3)
UNIT_VECTOR4 = unit_vector_of(4)
CIRCLE_SIZE = keyword_of(Radius, Diameter)
OFFSET_AMOUNT = keyword_of(Delta, Radius)
INDEX_LIST = list_of(int_strict)


# The base URL for OpenScad documentation,
OPEN_SCAD_BASE_URL = 'http://en.wikibooks.org/wiki/OpenSCAD_User_Manual/'


class OpenScadApiSpecifier(object):
    """Contains the specification of an OpenScad primitive."""

    def __init__(self, openscad_name, args, url_base, alt_url_anchor=None):
        """
        Args:
            openscad_name: The OpenScad primitive name.
            args: A tuple of Arg()s for each value passed in.
            url_base: The base of the document URL for OpenScad documentation.
        """
        self.openscad_name = openscad_name
        self.args = args
        self.url_base = url_base
        self.alt_url_anchor = alt_url_anchor
        self.args_map = dict((arg.name, arg) for arg in args)

        if len(self.args) != len(self.args_map):
            all_names = [arg.name for arg in self.args]
            dupes = sorted(set([name for name in all_names if all_names.count(name) > 1]))
            raise DuplicateNamingOfArgs('Duplicate parameter names %r' % dupes)

    def generate_class_doc(self):
        """Generates class level documentation."""
        lines = ['\nConverts to an OpenScad "%s" primitive.' % self.openscad_name]
        if self.url_base:
            anchor = self.openscad_name if self.alt_url_anchor is None else self.alt_url_anchor
            url = OPEN_SCAD_BASE_URL + self.url_base + '#' + anchor
            lines.append(
                'See OpenScad `%s docs <%s>` for more information.' % (self.openscad_name, url)
            )

        return '\n'.join(lines)

    def generate_init_doc(self):
        args = [arg for arg in self.args if arg.init]
        if args:
            return 'Args:\n    ' + ('\n    '.join(arg.document() for arg in args))
        return 'No arguments allowed.'


class LineWriter(object):
    """A CodeDumper writer that collects lines into a string. This API can be
    implemented for file writers or other uses."""

    def __init__(self):
        self._builder = []

    def get(self, terminated=True):
        """Returns the contents with every line ending in a newline, or with
        only the line separators if terminated is False."""
        if terminated:
            return '\n'.join(self._builder + [''])
        return '\n'.join(self._builder)

    def append(self, line):
        """Called by the CodeDumper to write generated lines. Override this
        function to implement other output mechanisms."""
        self._builder.append(line)


class FileWriter(object):
    """A CodeDumper writer that writes to a file."""

    def __init__(self, fp):
        self.fp = fp

    def append(self, line):
        """Called by the CodeDumper to write generated lines."""
        self.fp.write(line)
        self.fp.write('\n')


class CodeDumper(object):
    """Helper for pretty printing OpenScad scripts."""

    class IndentLevelState:
        """Indent level state."""

        def __init__(self, level):
            self.level = level

    def __init__(
        self,
        indent_char='\t',
        indent_multiple=1,
        writer=None,
        arg_separator=',',
        block_ends=('{', '}', ';'),
    ):
        """
        Args:
           indent_char: the character used to indent.
           indent_multiple: the number of indent_char added per indent level.
           writer: A writer, like LineWriter.
           arg_separator: placed between the arguments of a function call.
           block_ends: the block open line, block close line and statement
               terminator.
        """
        self.indent_char = indent_char
        self.indent_multiple = indent_multiple
        self.writer = writer or LineWriter()
        self.arg_separator = arg_separator
        self.block_ends = block_ends
        self.current_indent_level = 0
        self.current_indent_string = ''
        self.indent_level_stack = []

    def check_indent_level(self, level):
        """Check the adding of the resulting indent level will be in range.
        Args:
           level: The new requested indent level.
        Throws:
           InvalidIndentLevel level would is out of range
        """
        if level < 0:
            raise InvalidIndentLevel('Requested indent level below zero is not allowed.')

    def push_increase_indent(self, amount=1):
        """Push an indent level change and increase indent level.
        Args:
           amount: the amount to increase the indent level, Amount can be negative. default 1
        """
        current_level_state = CodeDumper.IndentLevelState(self.current_indent_level)
        self.set_indent_level(current_level_state.level + amount)
        self.indent_level_stack.append(current_level_state)

    def set_indent_level(self, level):
        self.check_indent_level(level)
        self.current_indent_level = level
        self.current_indent_string = (
            self.indent_char * self.indent_multiple * self.current_indent_level
        )

    def pop_indent_level(self):
        """Pops the indent level stack and sets the indent level to the popped value."""
        if len(self.indent_level_stack) == 0:
            raise IndentLevelStackEmpty('Empty indent level stack cannot be popped.')
        level_state = self.indent_level_stack.pop()
        self.set_indent_level(level_state.level)

    def add_line(self, line):
        """Adds the given line as a whole line the output.

        Args:
            line: string to be added.
        """
        self.writer.append(line)

    def write_line(self, line):
        """Adds an indented line to the output."""
        self.add_line(self.current_indent_string + line)

    def format_function(self, function_name, params_list, mod_prefix='', suffix=''):
        """Returns a function call.

        Args:
            function_name: name of function.
            params_list: list of parameters (no commas separating them)
            mod_prefix: a string added in front of the function name
            suffix: A string at the end
        """
        return ''.join(
            [mod_prefix, function_name, '(', self.arg_separator.join(params_list), ')', suffix])

    def write_function(self, function_name, params_list, mod_prefix='', suffix=';'):
        """Dumps a function call line."""
        self.write_line(self.format_function(function_name, params_list, mod_prefix, suffix))

    def render_value(self, value):
        """Returns a string representing the given value."""
        return get_code(value)

    def render_name_value(self, arg, value):
        """Returns the text of one argument of a function call."""
        if arg.positional:
            return self.render_value(value)
        name = arg.osc_name
        if isinstance(value, KeywordValue):
            name = value.KEYWORD + name
            value = value.value
        return arg.name_value_format % (name, self.render_value(value))

    def get_modifiers_prefix(self, obj):
        """Returns the OpenScad modifiers string."""
        return obj.get_modifiers()


class ScadElement(object):
    """Base class of all OpenScad operations. Subclasses declare OSC_API_SPEC
    and are decorated with apply_scad_attributes()."""

    OSC_API_SPEC: ClassVar[OpenScadApiSpecifier]

    def __post_init__(self):
        for arg in self.OSC_API_SPEC.args:
            value = getattr(self, arg.name)
            if value is not None:
                setattr(self, arg.name, arg.typ(value))

        # Object should be fully constructed now.
        self.check_valid()

    def check_valid(self):
        """Checks that the construction of the object is valid."""
        self.check_required_parameters()

    def check_required_parameters(self):
        """Checks that required parameters are set and not None."""
        for arg in self.OSC_API_SPEC.args:
            if arg.required and (getattr(self, arg.name, None) is None):
                raise RequiredParameterNotProvided(
                    '"%s" is required and not provided' % arg.name
                )

    def get_name(self):
        return self.OSC_API_SPEC.openscad_name

    def collect_args(self, code_dumper: CodeDumper):
        """Returns a list of arg=value pairs as strings."""
        result = []
        for arg in self.OSC_API_SPEC.args:
            v = getattr(self, arg.name, None)
            if v is not None:
                result.append(code_dumper.render_name_value(arg, v))
        return result

    def fmt_code(self, writer, code_dumper: CodeDumper = None):
        """Writes the function call form of this element, e.g. cube([1,1,1])."""
        code_dumper = code_dumper or CodeDumper()
        writer.append(code_dumper.format_function(self.get_name(), self.collect_args(code_dumper)))

    def get_code(self):
        """Returns the function call form of this element."""
        writer = StringWriter()
        self.fmt_code(writer)
        return writer.get()

    def equals(self, other):
        if not hasattr(other, 'OSC_API_SPEC'):
            return False
        # The OpenScadApiSpecifier identifies the element type.
        if self.OSC_API_SPEC is not other.OSC_API_SPEC:
            return False
        for arg in self.OSC_API_SPEC.args:
            if not arg.compare:
                continue
            if not _values_equal(getattr(self, arg.name), getattr(other, arg.name)):
                return False
        return True

    def __eq__(self, other):
        """Exact element equality. (Not resulting shape equality)"""
        return self.equals(other)

    def __ne__(self, other):
        return not self.equals(other)

    __hash__ = None

    def __str__(self):
        return self.get_code()

    def __repr__(self):
        return '%s<%s>' % (self.__class__.__name__, self.get_code())

    def __call__(self, *children):
        """Returns a ScadObject for this element with the given children, which
        may be ScadObjects or ScadElements."""
        from scadtree.scad_object import ScadObject
        return ScadObject(self).extend(children)


def _values_equal(a, b):
    if isinstance(a, np.ndarray) or isinstance(b, np.ndarray):
        return np.array_equal(np.asarray(a), np.asarray(b))
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        return len(a) == len(b) and all(_values_equal(x, y) for x, y in zip(a, b))
    return a == b


# A decorator for ScadElement classes.
def apply_scad_attributes(clazz):
    """Decorator that turns a ScadElement class into a dataclass whose fields
    are the args of its OSC_API_SPEC, with a generated docstring."""
    if '__init__' in clazz.__dict__:
        raise InitializerNotAllowed('class %s should not define __init__' % clazz.__name__)
    # Check for name collision.
    args: Tuple[Arg] = clazz.OSC_API_SPEC.args
    for arg in args:
        if hasattr(clazz, arg.name):
            raise NameCollissionFieldNameReserved(
                "There exists an attribute '%s' for class %s that collides with an arg."
                % (arg.name, clazz.__name__)
            )
    annotations = dict((arg.annotation() for arg in args))
    clazz.__annotations__ = annotations
    for arg in args:
        setattr(clazz, arg.name, arg.to_dataclass_field())
    dataclass(repr=False, eq=False)(clazz)
    clazz.__init__.__doc__ = clazz.OSC_API_SPEC.generate_init_doc()
    strs = []
    if clazz.__doc__:
        strs.append(clazz.__doc__)
    strs.append(clazz.OSC_API_SPEC.generate_class_doc())
    clazz.__doc__ = '\n'.join(strs)

    return clazz


# The set of OpenScad doumentation URL tails.
OPEN_SCAD_URL_TAIL_2D = 'Using_the_2D_Subsystem'
OPEN_SCAD_URL_TAIL_PRIMITIVES = 'Primitive_Solids'
OPEN_SCAD_URL_TAIL_TRANSFORMS = 'Transformations'
OPEN_SCAD_URL_TAIL_CSG = 'CSG_Modelling'
OPEN_SCAD_URL_TAIL_IMPORTING = 'Importing_Geometry'
