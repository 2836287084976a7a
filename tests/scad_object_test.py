'''
Tests for ScadObject trees.

'''

import io
import unittest

import scadtree as base
from scadtree import vec3


class Test(unittest.TestCase):
    def testSimpleStatement(self):
        test_stmt = base.ScadObject(base.Translate(vec3(0.0, 0.0, 0.0)))
        self.assertEqual(test_stmt.get_code(), 'translate([0,0,0]);')

        test_stmt.add_child(base.ScadObject(base.Cube(vec3(1.0, 1.0, 1.0))))
        self.assertEqual(test_stmt.get_code(), 'translate([0,0,0])\n{\n\tcube([1,1,1]);\n}')

        test_stmt.mark_important()
        self.assertEqual(test_stmt.get_code(), '!translate([0,0,0])\n{\n\tcube([1,1,1]);\n}')

        test_2 = base.ScadObject(base.Union()).important()
        self.assertEqual(test_2.get_code(), '!union();')

    def testMarkImportantIsIdempotent(self):
        obj = base.ScadObject(base.Sphere(base.Radius(1)))
        self.assertFalse(obj.is_important())
        obj.mark_important()
        obj.mark_important()
        self.assertTrue(obj.is_important())
        self.assertEqual(obj.get_code(), '!sphere(r=1);')
        self.assertEqual(obj.get_modifiers(), '!')

    def testLeafHasNoBlock(self):
        code = base.ScadObject(base.Cube(vec3(1, 2, 3))).get_code()
        self.assertTrue(code.endswith(';'))
        self.assertNotIn('{', code)
        self.assertNotIn('}', code)

    def testNestedIndentation(self):
        obj = base.scad(
            base.Union(),
            base.scad(base.Translate(vec3(1, 2, 3)), base.Cube(vec3(1, 1, 1))),
            base.Sphere(base.Radius(2)),
        )
        self.assertEqual(
            obj.get_code(),
            '\n'.join(
                (
                    'union()',
                    '{',
                    '\ttranslate([1,2,3])',
                    '\t{',
                    '\t\tcube([1,1,1]);',
                    '\t}',
                    '\tsphere(r=2);',
                    '}',
                )
            ),
        )

    def testDeepNesting(self):
        obj = base.ScadObject(base.Cube(vec3(1, 1, 1)))
        for _ in range(3):
            obj = base.Union()(obj)
        lines = obj.get_code().split('\n')
        self.assertEqual(lines[0], 'union()')
        self.assertIn('\t\t\tcube([1,1,1]);', lines)
        self.assertEqual(lines[-1], '}')

    def testImportantChild(self):
        obj = base.Difference()(
            base.Cube(vec3(10, 10, 10)),
            base.ScadObject(base.Cylinder(20, base.Radius(2))).important(),
        )
        self.assertEqual(
            obj.get_code(),
            'difference()\n{\n\tcube([10,10,10]);\n\t!cylinder(h=20,r=2);\n}')

    def testCallSyntax(self):
        built = base.ScadObject(base.Translate(vec3(0, 0, 0)))
        built.add_child(base.ScadObject(base.Cube(vec3(1, 1, 1))))
        called = base.Translate(vec3(0, 0, 0))(base.Cube(vec3(1, 1, 1)))
        self.assertEqual(built, called)
        self.assertEqual(str(built), str(called))

        appended = base.ScadObject(base.Translate(vec3(0, 0, 0)))(
            base.ScadObject(base.Cube(vec3(1, 1, 1))))
        self.assertEqual(built, appended)

    def testChildOrder(self):
        obj = base.ScadObject(base.Union())
        obj.append(base.Sphere(base.Radius(1)), base.Cube(vec3(1, 1, 1)))
        obj.extend([base.Circle(base.Diameter(3))])
        self.assertEqual(
            obj.get_code(),
            'union()\n{\n\tsphere(r=1);\n\tcube([1,1,1]);\n\tcircle(d=3);\n}')

    def testAddNonScadObject(self):
        obj = base.ScadObject(base.Union())
        self.assertRaisesRegex(
            base.AttemptingToAddNonScadObject, 'Cannot append object', obj.add_child, 'cube')
        self.assertRaises(base.AttemptingToAddNonScadObject, obj.append, None)
        self.assertRaises(base.AttemptingToAddNonScadObject, base.ScadObject, 'union')

    def testSharedChildIsCopied(self):
        child = base.ScadObject(base.Cube(vec3(1, 1, 1)))
        p1 = base.ScadObject(base.Union())
        p2 = base.ScadObject(base.Hull())
        p1.add_child(child)
        p2.add_child(child)
        self.assertIs(p1.children()[0], child)
        self.assertIsNot(p2.children()[0], child)
        self.assertEqual(p2.children()[0], child)

        child.mark_important()
        self.assertEqual(p1.get_code(), 'union()\n{\n\t!cube([1,1,1]);\n}')
        self.assertEqual(p2.get_code(), 'hull()\n{\n\tcube([1,1,1]);\n}')

    def testAddSelf(self):
        obj = base.ScadObject(base.Union())
        obj.add_child(obj)
        self.assertEqual(obj.get_code(), 'union()\n{\n\tunion();\n}')

    def testNoCaching(self):
        obj = base.ScadObject(base.Union())
        self.assertEqual(obj.render(), 'union();')
        self.assertEqual(obj.render(), 'union();')
        obj.add_child(base.ScadObject(base.Hull()))
        self.assertEqual(obj.render(), 'union()\n{\n\thull();\n}')

    def testDump(self):
        obj = base.Translate(vec3(1, 0, 0))(base.Cube(vec3(1, 1, 1)))
        fp = io.StringIO()
        obj.dump(fp)
        self.assertEqual(fp.getvalue(), obj.get_code() + '\n')

    def testAsValue(self):
        obj = base.ScadObject(base.Sphere(base.Diameter(7)))
        self.assertEqual(base.get_code(obj), 'sphere(d=7);')

    def testEquality(self):
        a = base.Union()(base.Cube(vec3(1, 1, 1)))
        b = base.Union()(base.Cube(vec3(1, 1, 1)))
        self.assertEqual(a, b)
        b.mark_important()
        self.assertNotEqual(a, b)
        self.assertNotEqual(a, base.Union()(base.Cube(vec3(1, 1, 2))))
        self.assertNotEqual(a, base.Union())

    def testClone(self):
        a = base.Union()(base.Cube(vec3(1, 1, 1)))
        b = a.clone()
        self.assertEqual(a, b)
        b.add_child(base.ScadObject(base.Hull()))
        self.assertNotEqual(a, b)
        self.assertEqual(len(a.children()), 1)


if __name__ == "__main__":
    unittest.main()
