"""
OpenScad modifiers and the scadtree exception root.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True, repr=False)
class OscModifier(object):
    """Defines an OpenScad modifier

    see: https://en.wikibooks.org/wiki/OpenSCAD_User_Manual/Modifier_Characters
    """
    modifier: str = field(compare=True)
    name: str = field(compare=False)

    def __repr__(self):
        return self.name


SHOW_ONLY = OscModifier('!', 'SHOW_ONLY') # Ignore the rest of the tree


# Exceptions for dealing with argument checking.
class ScadBaseException(Exception):
    """Base exception functionality"""


class ScadModifiers(object):
    """Functions to mark a node as important.

    An important node is emitted with the OpenScad SHOW_ONLY modifier (!) which
    tells OpenScad to render only that node and its children.

    e.g.
    ScadObject(Union()).important()

    Will render as:
        !union();
    """

    def mark_important(self):
        """Sets the important flag. Calling it more than once has no further effect."""
        self._important = True

    def important(self):
        """Marks this as important and returns self so it can be chained."""
        self.mark_important()
        return self

    def is_important(self):
        if not hasattr(self, '_important'):
            return False
        return self._important

    def get_modifiers(self):
        """Returns the current modifiers as an OpenScad modifier string."""
        return SHOW_ONLY.modifier if self.is_important() else ''
