'''
Tests for ScadFile documents and the scad_main runner.

'''

import contextlib
import io
import os
import tempfile
import unittest

import scadtree as base
from scadtree import vec3
from scadtree.scad_main import ScadMainRunner, scad_main


def make_wall():
    return base.Difference()(
        base.Color(vec3(1, 1, 1))(base.Cube(vec3(10, 0.2, 2.5))),
        base.Translate(vec3(3, -0.01, 1))(base.Cube(vec3(1, 0.22, 1))),
    )


class Test(unittest.TestCase):
    def testEmpty(self):
        self.assertEqual(base.ScadFile().get_code(), '')

    def testObjectsAreNewlineTerminated(self):
        scad_file = base.ScadFile()
        scad_file.add_object(base.ScadObject(base.Cube(vec3(1, 1, 1))))
        scad_file.add_object(base.Sphere(base.Radius(1)))
        self.assertEqual(scad_file.get_code(), 'cube([1,1,1]);\nsphere(r=1);\n')
        self.assertEqual(str(scad_file), scad_file.get_code())

    def testDetail(self):
        scad_file = base.ScadFile([base.Cube(vec3(1, 1, 1))], detail=50)
        self.assertEqual(scad_file.get_code(), '$fn=50;\ncube([1,1,1]);\n')
        scad_file.set_detail(8)
        self.assertEqual(scad_file.get_code(), '$fn=8;\ncube([1,1,1]);\n')
        self.assertRaises(ValueError, scad_file.set_detail, 1.5)

    def testBlocks(self):
        scad_file = base.ScadFile([make_wall()])
        self.assertEqual(
            scad_file.get_code(),
            '\n'.join(
                (
                    'difference()',
                    '{',
                    '\tcolor([1,1,1])',
                    '\t{',
                    '\t\tcube([10,0.2,2.5]);',
                    '\t}',
                    '\ttranslate([3,-0.01,1])',
                    '\t{',
                    '\t\tcube([1,0.22,1]);',
                    '\t}',
                    '}',
                    '',
                )
            ),
        )

    def testWriteToFile(self):
        scad_file = base.ScadFile([make_wall(), base.Sphere(base.Diameter(2))], detail=20)
        with tempfile.TemporaryDirectory() as tmpdir:
            filename = os.path.join(tmpdir, 'wall.scad')
            scad_file.write_to_file(filename)
            with open(filename, encoding='utf-8') as fp:
                self.assertEqual(fp.read(), scad_file.get_code())

    def testWriteToFileFails(self):
        scad_file = base.ScadFile([base.Union()])
        with tempfile.TemporaryDirectory() as tmpdir:
            filename = os.path.join(tmpdir, 'missing', 'out.scad')
            with self.assertLogs('scadtree.scad_file', level='ERROR'):
                with self.assertRaises(base.PersistFailed) as cm:
                    scad_file.write_to_file(filename)
            self.assertIsInstance(cm.exception.__cause__, OSError)

    def testDump(self):
        scad_file = base.ScadFile([base.Union()])
        fp = io.StringIO()
        scad_file.dump(fp)
        self.assertEqual(fp.getvalue(), 'union();\n')

    def testScadMainStdout(self):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            result = scad_main(
                [base.Cube(vec3(1, 1, 1)), lambda: base.Union()(base.Hull())],
                argv=['--stdout', '--detail', '12'])
        self.assertEqual(result, 0)
        self.assertEqual(
            out.getvalue(), '$fn=12;\ncube([1,1,1]);\nunion()\n{\n\thull();\n}\n')

    def testScadMainWritesFile(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            base_name = os.path.join(tmpdir, 'model')
            out = io.StringIO()
            with contextlib.redirect_stdout(out):
                result = scad_main([make_wall], argv=['--output-base', base_name])
            self.assertEqual(result, 0)
            self.assertIn('Exported SCAD', out.getvalue())
            with open(base_name + '.scad', encoding='utf-8') as fp:
                self.assertEqual(fp.read(), base.ScadFile([make_wall()]).get_code())

    def testScadMainDefaultOutputBase(self):
        runner = ScadMainRunner([base.Union()], '/some/where/my_model.py', argv=[])
        self.assertEqual(runner.output_base(), 'my_model')
        self.assertIsNone(runner.args.detail)
        self.assertFalse(runner.args.stdout)

    def testScadMainReportsPersistFailure(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            base_name = os.path.join(tmpdir, 'missing', 'model')
            err = io.StringIO()
            with contextlib.redirect_stderr(err), self.assertLogs('scadtree.scad_file'):
                result = scad_main([base.Union()], argv=['--output-base', base_name])
            self.assertEqual(result, 1)
            self.assertIn('failed', err.getvalue())

    def testScadMainNoItems(self):
        err = io.StringIO()
        with contextlib.redirect_stderr(err):
            self.assertEqual(scad_main([], argv=[]), 1)


if __name__ == "__main__":
    unittest.main()
