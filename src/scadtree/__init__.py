from scadtree.modifier import *  # noqa: F401,F403
from scadtree.scad_type import *  # noqa: F401,F403
from scadtree.base import *  # noqa: F401,F403
from scadtree.scad_element import *  # noqa: F401,F403
from scadtree.scad_object import *  # noqa: F401,F403
from scadtree.scad_file import *  # noqa: F401,F403
