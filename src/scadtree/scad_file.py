"""An OpenScad document, an ordered list of top level objects, and saving it."""

import logging

from datatrees import datatree, dtfield

from scadtree.base import int_strict
from scadtree.modifier import ScadBaseException
from scadtree.scad_object import ScadObject

log = logging.getLogger(__name__)


class PersistFailed(ScadBaseException):
    """Writing the generated script to storage failed."""


@datatree
class ScadFile:
    """A collection of top level ScadObjects rendered one after the other.

    If detail is set the document starts with a global $fn=<detail>; which sets
    the number of fragments OpenScad uses for circles, spheres and cylinders.
    """

    objects: list = dtfield(default_factory=list)
    detail: int = None

    def __post_init__(self):
        objects = self.objects
        self.objects = []
        for obj in objects:
            self.add_object(obj)
        if self.detail is not None:
            self.set_detail(self.detail)

    def add_object(self, obj: ScadObject):
        """Appends a top level object."""
        if not isinstance(obj, ScadObject):
            obj = ScadObject(obj)
        self.objects.append(obj)

    def set_detail(self, detail: int):
        self.detail = int_strict(detail)

    def get_code(self):
        """Returns the whole document. Every top level object is followed by a newline."""
        parts = []
        if self.detail is not None:
            parts.append('$fn=%d;\n' % self.detail)
        for obj in self.objects:
            parts.append(obj.get_code())
            parts.append('\n')
        return ''.join(parts)

    def __str__(self):
        return self.get_code()

    def dump(self, fp):
        """Writes the document to the given text file object."""
        fp.write(self.get_code())

    def write_to_file(self, filename, encoding='utf-8'):
        """Writes the document to the given file name.
        Args:
            filename: The filename to create.
        Throws:
            PersistFailed if the file could not be written.
        """
        code = self.get_code()
        try:
            with open(filename, 'w', encoding=encoding) as fp:
                fp.write(code)
        except OSError as e:
            log.error(f"Failed to write OpenScad file '{filename}': {e}")
            raise PersistFailed(f"saving OpenScad file '{filename}' failed") from e
        log.debug(f"Wrote {len(self.objects)} objects to '{filename}'")
