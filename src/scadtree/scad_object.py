"""ScadObject, a node of an OpenScad model tree.

A ScadObject is a single ScadElement optionally followed by any number of
child objects. This represents the following OpenScad code:

    translate([1,2,3])
    {
    	cube([3,5,1]);
    }

The tree is built with add_child() or the call syntax:

    obj = ScadObject(Union())
    obj.add_child(ScadObject(Cube(vec3(1, 1, 1))))

    obj = Translate(vec3(1, 2, 3))(Cube(vec3(3, 5, 1)))
"""

import copy

from scadtree.base import CodeDumper, FileWriter, ScadElement
from scadtree.modifier import ScadBaseException, ScadModifiers


class AttemptingToAddNonScadObject(ScadBaseException):
    """Attempted to add an invalid object to child nodes."""


class ScadObject(ScadModifiers):
    """A ScadElement with ordered children and an important flag.

    Children are owned by their parent. A child that already belongs to
    another parent is copied when appended so no node is shared.
    """

    def __init__(self, element: ScadElement):
        if not isinstance(element, ScadElement):
            raise AttemptingToAddNonScadObject(
                'Cannot create a ScadObject from %r, a ScadElement is required' % (element,))
        self.element = element
        self._children = []
        self._has_parent = False

    def has_children(self):
        """Returns true if the node has children."""
        return bool(self._children)

    def children(self) -> list['ScadObject']:
        """Returns the list of children"""
        return self._children

    def add_child(self, child: 'ScadObject'):
        """Appends a child to this node."""
        self.extend((child,))

    def append(self, *children):
        """Appends the children to this node.
        Args:
          *children: children to append.
        """
        return self.extend(children)

    def extend(self, children):
        """Appends the list of children to this node. ScadElement children are
        wrapped in a new ScadObject.
        Args:
          children: list of children to append.
        """
        adopted = []
        for child in children:
            if isinstance(child, ScadElement):
                child = ScadObject(child)
            elif not isinstance(child, ScadObject):
                raise AttemptingToAddNonScadObject(
                    'Cannot append object %r as child node' % (child,)
                )
            elif child._has_parent or child is self:
                child = child.clone()
            child._has_parent = True
            adopted.append(child)
        self._children.extend(adopted)
        return self

    # Support Obj(child, ...) constructs like that in OpenScad.
    __call__ = append

    def code_dump(self, code_dumper: CodeDumper):
        """Dump the OpenScad equivalent of this node into the provided dumper."""
        suffix = '' if self.has_children() else code_dumper.block_ends[2]
        code_dumper.write_function(
            self.element.get_name(),
            self.element.collect_args(code_dumper),
            code_dumper.get_modifiers_prefix(self),
            suffix,
        )
        if self.has_children():
            code_dumper.write_line(code_dumper.block_ends[0])
            code_dumper.push_increase_indent()
            for child in self.children():
                child.code_dump(code_dumper)
            code_dumper.pop_indent_level()
            code_dumper.write_line(code_dumper.block_ends[1])

    def dump_with_code_dumper(self, code_dumper: CodeDumper):
        self.code_dump(code_dumper)
        return code_dumper

    def get_code(self):
        """Returns the OpenScad code for this node, without a final newline.

        With no children this is the element followed by ;. Otherwise the
        element is followed by the children in a {} block, each indented by
        one tab.
        """
        return self.dump_with_code_dumper(CodeDumper()).writer.get(terminated=False)

    render = get_code

    def fmt_code(self, writer):
        writer.append(self.get_code())

    def __str__(self):
        return self.get_code()

    def __repr__(self):
        return 'ScadObject<%s>' % self.get_code()

    def dump(self, fp):
        """Writes this object's OpenScad script to the given file.
        Args:
            fp: The python file object to use.
        """
        self.dump_with_code_dumper(CodeDumper(writer=FileWriter(fp)))

    def clone(self):
        result = copy.deepcopy(self)
        result._has_parent = False
        return result

    def equals(self, other):
        if not isinstance(other, ScadObject):
            return False
        return (
            self.element == other.element
            and self.is_important() == other.is_important()
            and self.children() == other.children()
        )

    def __eq__(self, other):
        """Exact object tree equality. (Not resulting shape equality)"""
        return self.equals(other)

    def __ne__(self, other):
        return not self.equals(other)

    __hash__ = None


def scad(element: ScadElement, *children):
    """Returns a ScadObject for element with the given children appended.

    e.g.
        scad(Union(), scad(Cube(vec3(1, 1, 1))), Sphere(Radius(2)))
    """
    return ScadObject(element).extend(children)
