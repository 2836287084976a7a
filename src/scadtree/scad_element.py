"""The closed set of OpenScad operations a ScadObject can hold.

Each class declares its OpenScad name and arguments with an
OpenScadApiSpecifier. Arguments are converted when the element is constructed,
vectors become float32 numpy arrays and bools are strictly checked.
"""

from datatrees import datatree, dtfield

from scadtree.base import (
    Arg,
    CIRCLE_SIZE,
    INDEX_LIST,
    OFFSET_AMOUNT,
    OPEN_SCAD_URL_TAIL_2D,
    OPEN_SCAD_URL_TAIL_CSG,
    OPEN_SCAD_URL_TAIL_IMPORTING,
    OPEN_SCAD_URL_TAIL_PRIMITIVES,
    OPEN_SCAD_URL_TAIL_TRANSFORMS,
    OpenScadApiSpecifier,
    SPACED,
    ScadElement,
    UNIT_VECTOR3,
    UNIT_VECTOR4,
    VECTOR2_F32,
    VECTOR3_F32,
    VECTOR3_F32_FILL_0,
    apply_scad_attributes,
    bool_strict,
    check_unit_interval,
    float_strict,
    int_strict,
    list_of,
    one_of,
    str_strict,
    uint_strict,
)
from scadtree.scad_type import render_value


def write_named_args(writer, pairs):
    """Writes name=value pairs separated by commas."""
    for i, (name, value) in enumerate(pairs):
        if i:
            writer.append(',')
        writer.append(name)
        writer.append('=')
        render_value(value, writer)


@datatree
class LinExtrudeParams:
    """Parameters for linear_extrude(). Every parameter has a default so only
    the ones that differ need to be given."""

    height: float = 1.0
    center: bool = False
    convexity: int = 10
    twist: float = 0.0
    slices: int = 1

    def __post_init__(self):
        self.height = float_strict(self.height)
        self.center = bool_strict(self.center)
        self.convexity = int_strict(self.convexity)
        self.twist = float_strict(self.twist)
        self.slices = int_strict(self.slices)

    def fmt_code(self, writer):
        write_named_args(
            writer,
            (
                ('height', self.height),
                ('center', self.center),
                ('convexity', self.convexity),
                ('twist', self.twist),
                ('slices', self.slices),
            ),
        )


@datatree
class RotateExtrudeParams:
    """Parameters for rotate_extrude()."""

    angle: float = 360.0
    convexity: int = 10

    def __post_init__(self):
        self.angle = float_strict(self.angle)
        self.convexity = uint_strict(self.convexity)

    def fmt_code(self, writer):
        write_named_args(writer, (('angle', self.angle), ('convexity', self.convexity)))


POLYGON_POINTS = list_of(VECTOR2_F32)
POLYGON_PATHS = one_of(INDEX_LIST, list_of(INDEX_LIST))


@datatree
class PolygonParameters:
    """Parameters for polygon().

    paths is None (rendered as undef, all points in order), a single list of
    point indexes or a list of such lists where the lists after the first
    describe holes.
    """

    points: list
    paths: list = dtfield(default=None)
    convexity: int = 10

    def __post_init__(self):
        self.points = POLYGON_POINTS(self.points)
        if self.paths is not None:
            self.paths = POLYGON_PATHS(self.paths)
        self.convexity = uint_strict(self.convexity)

    def single_vector_path(self, path):
        """Returns a copy with a single path of point indexes."""
        return PolygonParameters(self.points, INDEX_LIST(path), self.convexity)

    def multi_vector_path(self, paths):
        """Returns a copy with several paths, the first is the outline."""
        return PolygonParameters(self.points, list_of(INDEX_LIST)(paths), self.convexity)

    def with_convexity(self, convexity):
        return PolygonParameters(self.points, self.paths, convexity)

    def fmt_code(self, writer):
        write_named_args(
            writer,
            (('points', self.points), ('paths', self.paths), ('convexity', self.convexity)),
        )


def _params_of(clazz):
    def converter(value):
        if not isinstance(value, clazz):
            raise TypeError('expected %s but got "%r"' % (clazz.__name__, value))
        return value

    converter.__name__ = clazz.__name__
    return converter


#
# Transformations.
#


@apply_scad_attributes
class Translate(ScadElement):
    """Translate child nodes."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'translate',
        (
            Arg('v', VECTOR3_F32_FILL_0, None, '(x,y,z) translation vector.',
                required=True, positional=True),
        ),
        OPEN_SCAD_URL_TAIL_TRANSFORMS,
    )


@apply_scad_attributes
class Scale(ScadElement):
    """Scales the child nodes."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'scale',
        (
            Arg('v', VECTOR3_F32, None, 'The (x,y,z) scale factors.',
                required=True, positional=True),
        ),
        OPEN_SCAD_URL_TAIL_TRANSFORMS,
    )


@apply_scad_attributes
class Resize(ScadElement):
    """Scales the object so it has the newsize (x,y,z). If auto is true, zero
    sizes are scaled in proportion to the other axes."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'resize',
        (
            Arg('newsize', VECTOR3_F32, None, 'The new (x,y,z) sizes of the resulting object.',
                required=True, positional=True),
            Arg('auto', bool_strict, False, 'Scale zero sized axes automatically.',
                name_value_format=SPACED),
        ),
        OPEN_SCAD_URL_TAIL_TRANSFORMS,
    )


@apply_scad_attributes
class Rotate(ScadElement):
    """Rotate child nodes by angle a about the axis v."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'rotate',
        (
            Arg('a', float_strict, None, 'Angle to rotate in degrees.',
                required=True, positional=True),
            Arg('v', VECTOR3_F32, None, '(x,y,z) axis of rotation vector.',
                required=True, positional=True),
        ),
        OPEN_SCAD_URL_TAIL_TRANSFORMS,
    )


@apply_scad_attributes
class RotateVec(ScadElement):
    """Rotate child nodes about the x, y and z axis in sequence."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'rotate',
        (
            Arg('a', VECTOR3_F32, None, 'The (x,y,z) angles in degrees.',
                required=True, positional=True),
        ),
        OPEN_SCAD_URL_TAIL_TRANSFORMS,
    )


@apply_scad_attributes
class Mirror(ScadElement):
    """Mirrors across a plane defined by the normal v."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'mirror',
        (
            Arg('v', VECTOR3_F32, None, 'The normal of the plane to be mirrored.',
                required=True, positional=True),
        ),
        OPEN_SCAD_URL_TAIL_TRANSFORMS,
    )


@apply_scad_attributes
class LinearExtrude(ScadElement):
    """Creates an 3D object with a linear extrusion of a 2D shape."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'linear_extrude',
        (
            Arg('params', _params_of(LinExtrudeParams), None,
                'The extrusion parameters, LinExtrudeParams() if not provided.',
                positional=True),
        ),
        OPEN_SCAD_URL_TAIL_2D,
        'Linear_Extrude',
    )

    def check_valid(self):
        if self.params is None:
            self.params = LinExtrudeParams()
        self.check_required_parameters()


@apply_scad_attributes
class RotateExtrude(ScadElement):
    """Creates an 3D object with a rotating extrusion of a 2D shape."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'rotate_extrude',
        (
            Arg('params', _params_of(RotateExtrudeParams), None,
                'The extrusion parameters, RotateExtrudeParams() if not provided.',
                positional=True),
        ),
        OPEN_SCAD_URL_TAIL_2D,
        'Rotate_Extrude',
    )

    def check_valid(self):
        if self.params is None:
            self.params = RotateExtrudeParams()
        self.check_required_parameters()


#
# Boolean combinators.
#


@apply_scad_attributes
class Difference(ScadElement):
    """Creates a 3D object by removing the space of the 3D objects following the first
    object provided from the first object."""

    OSC_API_SPEC = OpenScadApiSpecifier('difference', (), OPEN_SCAD_URL_TAIL_CSG)


@apply_scad_attributes
class Union(ScadElement):
    """Unifies a set of 3D objects into a single object by performing a union of all the space
    contained by all the shapes."""

    OSC_API_SPEC = OpenScadApiSpecifier('union', (), OPEN_SCAD_URL_TAIL_CSG)


@apply_scad_attributes
class Hull(ScadElement):
    """Create a hull of the child nodes."""

    OSC_API_SPEC = OpenScadApiSpecifier('hull', (), OPEN_SCAD_URL_TAIL_TRANSFORMS)


@apply_scad_attributes
class Intersection(ScadElement):
    """Creates a 3D object by finding the common space contained in all the provided
    3D objects."""

    OSC_API_SPEC = OpenScadApiSpecifier('intersection', (), OPEN_SCAD_URL_TAIL_CSG)


@apply_scad_attributes
class Minkowski(ScadElement):
    """Create a Minkowski sum of the child nodes."""

    OSC_API_SPEC = OpenScadApiSpecifier('minkowski', (), OPEN_SCAD_URL_TAIL_TRANSFORMS)


#
# 3D primitives.
#


@apply_scad_attributes
class Cube(ScadElement):
    """Creates a cube with it's bottom corner at the origin."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'cube',
        (
            Arg('size', VECTOR3_F32, None,
                'The x, y and z sizes of the cube or rectangular prism',
                required=True, positional=True),
        ),
        OPEN_SCAD_URL_TAIL_PRIMITIVES,
    )


@apply_scad_attributes
class CenteredCube(ScadElement):
    """Creates a cube with it's center at the origin."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'cube',
        (
            Arg('size', VECTOR3_F32, None,
                'The x, y and z sizes of the cube or rectangular prism',
                required=True, positional=True),
            Arg('center', bool_strict, True, 'Always true.',
                init=False, compare=False, name_value_format=SPACED),
        ),
        OPEN_SCAD_URL_TAIL_PRIMITIVES,
    )


@apply_scad_attributes
class Cylinder(ScadElement):
    """Creates a cylinder about the z axis with its base at z=0."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'cylinder',
        (
            Arg('h', float_strict, None, 'height of the cylinder.', required=True),
            Arg('size', CIRCLE_SIZE, None, 'Radius(r) or Diameter(d) of the cylinder.',
                required=True, osc_name=''),
        ),
        OPEN_SCAD_URL_TAIL_PRIMITIVES,
    )


@apply_scad_attributes
class Sphere(ScadElement):
    """Creates a sphere centered at the origin."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'sphere',
        (
            Arg('size', CIRCLE_SIZE, None, 'Radius(r) or Diameter(d) of the sphere.',
                required=True, osc_name=''),
        ),
        OPEN_SCAD_URL_TAIL_PRIMITIVES,
    )


@apply_scad_attributes
class Cone(ScadElement):
    """Creates a truncated cone about the z axis. The bottom and top sizes may
    each be a Radius or a Diameter."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'cylinder',
        (
            Arg('h', float_strict, None, 'height of the cone.', required=True),
            Arg('size1', CIRCLE_SIZE, None, 'size at the bottom of the cone.',
                required=True, osc_name='1'),
            Arg('size2', CIRCLE_SIZE, None, 'size at the top of the cone.',
                required=True, osc_name='2'),
        ),
        OPEN_SCAD_URL_TAIL_PRIMITIVES,
    )


@apply_scad_attributes
class Polyhedron(ScadElement):
    """Creates an arbitrary polyhedron 3D object."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'polyhedron',
        (
            Arg('points', list_of(VECTOR3_F32), None,
                'A list of 3D points. The index to these points are used in faces.',
                required=True),
            Arg('faces', list_of(list_of(int_strict)), None,
                'A list of faces. Each face is a list of indexes into the points list',
                required=True),
        ),
        OPEN_SCAD_URL_TAIL_PRIMITIVES,
    )


@apply_scad_attributes
class Import(ScadElement):
    """Import a file as 3D or 2D shapes.
    SVG and DXF files generate 2D shapes.
    STL, OFF, AMF and 3MF files generate 3D shapes."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'import',
        (
            Arg('file', str_strict, None,
                'The filename to import. Relative path names are relative to the script location.',
                required=True, positional=True),
        ),
        OPEN_SCAD_URL_TAIL_IMPORTING,
    )


#
# 2D primitives and transformations.
#


@apply_scad_attributes
class Square(ScadElement):
    """Creates a 2D rectangle with a corner at the origin."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'square',
        (
            Arg('size', VECTOR2_F32, None, 'The (x,y) size of the rectangle.',
                required=True, positional=True),
        ),
        OPEN_SCAD_URL_TAIL_2D,
    )


@apply_scad_attributes
class Circle(ScadElement):
    """Creates a 2D circle shape."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'circle',
        (
            Arg('size', CIRCLE_SIZE, None, 'Radius(r) or Diameter(d) of the circle.',
                required=True, osc_name=''),
        ),
        OPEN_SCAD_URL_TAIL_2D,
    )


@apply_scad_attributes
class Polygon(ScadElement):
    """Creates a polygon 2D shape (with optional holes)."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'polygon',
        (
            Arg('params', _params_of(PolygonParameters), None,
                'The points, paths and convexity of the polygon.',
                required=True, positional=True),
        ),
        OPEN_SCAD_URL_TAIL_2D,
        'Polygons',
    )


@apply_scad_attributes
class Offset(ScadElement):
    """Generates a new polygon with the outline offset by the given amount. Negative values
    shrink the outline while positive values enlarge it."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'offset',
        (
            Arg('amount', OFFSET_AMOUNT, None,
                'Delta(delta) for a straight offset or Radius(r) for a rounded one.',
                required=True, osc_name=''),
            Arg('chamfer', bool_strict, False, 'If true will create chamfers at corners.'),
        ),
        OPEN_SCAD_URL_TAIL_TRANSFORMS,
    )


@apply_scad_attributes
class Projection(ScadElement):
    """Project a 3D object into a 2D surface."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'projection',
        (
            Arg('cut', bool_strict, False,
                'If false, the projection is a "shadow" of the object otherwise it is an intersection.'),
        ),
        OPEN_SCAD_URL_TAIL_2D,
        '3D_to_2D_Projection',
    )


@apply_scad_attributes
class Rotate2d(ScadElement):
    """Rotate 2D child nodes about the z axis."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'rotate',
        (
            Arg('a', float_strict, None, 'Angle to rotate in degrees.',
                required=True, positional=True),
        ),
        OPEN_SCAD_URL_TAIL_TRANSFORMS,
    )


@apply_scad_attributes
class Translate2d(ScadElement):
    """Translate 2D child nodes."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'translate',
        (
            Arg('v', VECTOR2_F32, None, '(x,y) translation vector.',
                required=True, positional=True),
        ),
        OPEN_SCAD_URL_TAIL_TRANSFORMS,
    )


@apply_scad_attributes
class Scale2d(ScadElement):
    """Scales 2D child nodes."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'scale',
        (
            Arg('v', VECTOR2_F32, None, 'The (x,y) scale factors.',
                required=True, positional=True),
        ),
        OPEN_SCAD_URL_TAIL_TRANSFORMS,
    )


#
# Colors.
#


class _ColorVector(ScadElement):
    """Color components are checked again when rendered since the field may
    have been reassigned after construction."""

    def collect_args(self, code_dumper):
        check_unit_interval(self.c)
        return super().collect_args(code_dumper)


@apply_scad_attributes
class Color(_ColorVector):
    """Apply an RGB color (only supported in OpenScad preview mode)."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'color',
        (
            Arg('c', UNIT_VECTOR3, None, 'The (r,g,b) color, each in [0, 1].',
                required=True, positional=True),
        ),
        OPEN_SCAD_URL_TAIL_TRANSFORMS,
    )


@apply_scad_attributes
class ColorAlpha(_ColorVector):
    """Apply an RGBA color (only supported in OpenScad preview mode)."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'color',
        (
            Arg('c', UNIT_VECTOR4, None, 'The (r,g,b,a) color, each in [0, 1].',
                required=True, positional=True),
        ),
        OPEN_SCAD_URL_TAIL_TRANSFORMS,
    )


@apply_scad_attributes
class NamedColor(ScadElement):
    """Apply a color by name, e.g. "aqua" or "#ff0000"."""

    OSC_API_SPEC = OpenScadApiSpecifier(
        'color',
        (
            Arg('name', str_strict, None, 'The color name.', required=True, positional=True),
        ),
        OPEN_SCAD_URL_TAIL_TRANSFORMS,
    )
