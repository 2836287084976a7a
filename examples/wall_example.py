"""
wall_example.py: A scadtree example.

This script builds a wall with a window and a door and generates OpenSCAD code
starting with:

```openscad
union()
{
	difference()
	{
		color([1,1,1])
		{
			cube([10,0.2,2.5]);
		}
		...
```
---
How to run this example:

- To generate wall_example.scad:
  python examples/wall_example.py

- To print the script instead:
  python examples/wall_example.py --stdout
---

"""

# 1. Import the necessary components from the library.
from scadtree import (
    CenteredCube,
    Color,
    ColorAlpha,
    Cube,
    Difference,
    Radius,
    Sphere,
    Translate,
    Union,
    vec3,
    vec4,
)
from scadtree.scad_main import scad_main

BLACK = vec3(0.0, 0.0, 0.0)
WHITE = vec3(1.0, 1.0, 1.0)


def frame_bar(position, size):
    return Translate(position)(Color(BLACK)(CenteredCube(size)))


def handle(position):
    return Translate(position)(Color(WHITE)(Sphere(Radius(0.05))))


# 2. Create the model.
def make_model():
    wall = Difference()(
        Color(WHITE)(Cube(vec3(10.0, 0.2, 2.5))),
        # window
        Translate(vec3(3.0, -0.01, 1.0))(Cube(vec3(1.0, 0.22, 1.0))),
        # door
        Translate(vec3(6.0, -0.01, -0.01))(Cube(vec3(1.0, 0.22, 2.01))),
    )
    return Union()(
        wall,
        # window
        Translate(vec3(3.0, 0.05, 1.0))(
            ColorAlpha(vec4(0.0, 1.0, 1.0, 0.5))(Cube(vec3(1.0, 0.1, 1.0)))),
        frame_bar(vec3(3.0, 0.1, 1.5), vec3(0.04, 0.24, 1.04)),
        frame_bar(vec3(4.0, 0.1, 1.5), vec3(0.04, 0.24, 1.04)),
        frame_bar(vec3(3.5, 0.1, 1.0), vec3(1.04, 0.24, 0.04)),
        frame_bar(vec3(3.5, 0.1, 2.0), vec3(1.04, 0.24, 0.04)),
        # door
        Translate(vec3(6.0, 0.0, 0.0))(
            Color(vec3(0.5, 0.5, 0.5))(Cube(vec3(1.0, 0.04, 2.0)))),
        frame_bar(vec3(6.0, 0.1, 1.0), vec3(0.04, 0.24, 2.04)),
        frame_bar(vec3(7.0, 0.1, 1.0), vec3(0.04, 0.24, 2.04)),
        frame_bar(vec3(6.5, 0.1, 2.0), vec3(1.04, 0.24, 0.04)),
        handle(vec3(6.85, -0.035, 1.0)),
        handle(vec3(6.85, 0.075, 1.0)),
    )


# 3. Use the `scad_main` utility to write the model.
if __name__ == "__main__":
    raise SystemExit(scad_main([make_model]))
