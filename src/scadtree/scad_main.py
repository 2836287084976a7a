import argparse
import inspect
import logging
import os
import sys
from typing import Callable, List, Union

from datatrees import datatree, dtfield

from scadtree.base import ScadElement
from scadtree.scad_file import PersistFailed, ScadFile
from scadtree.scad_object import ScadObject

log = logging.getLogger(__name__)

ScadItem = Union[ScadObject, ScadElement, Callable[[], ScadObject]]


def add_bool_arg(parser, name, help_text, default=False):
    parser.add_argument(
        f"--{name}",
        action="store_true",
        help=help_text
    )

    parser.add_argument(
        f"--no-{name}",
        action="store_false",
        dest=name,
        help=f"Disable: {help_text}"
    )
    parser.set_defaults(**{name: default})


def resolve_item(item: ScadItem) -> ScadObject:
    """Returns the ScadObject for an item, calling it first if it's a factory."""
    if isinstance(item, (ScadObject, ScadElement)):
        obj = item
    else:
        obj = item()
    if isinstance(obj, ScadElement):
        obj = ScadObject(obj)
    return obj


@datatree
class ScadMainRunner:
    """Parses arguments and writes the given models as an OpenScad script."""
    items: List[ScadItem]
    script_path: str
    argv: List[str] | None = None
    _args: argparse.Namespace | None = dtfield(default=None, init=False)
    parser: argparse.ArgumentParser | None = dtfield(
        self_default=lambda s: s._make_parser(), init=False)
    default_output_base: str | None = None
    default_detail: int | None = None
    default_stdout: bool = False

    @property
    def args(self) -> argparse.Namespace:
        if self._args is None:
            self.parse_args()
        return self._args

    def _make_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(description="Write scadtree models as an OpenScad script.")
        parser.add_argument(
            "--output-base",
            type=str,
            default=self.default_output_base,
            help="Base name for the .scad file. Defaults to the name of the calling script."
        )
        parser.add_argument(
            "--detail",
            type=int,
            default=self.default_detail,
            help="Global $fn fragment count written at the top of the script."
        )
        add_bool_arg(parser, "stdout", "Print the script instead of writing a file.",
                     default=self.default_stdout)
        return parser

    def parse_args(self):
        self._args = self.parser.parse_args(self.argv)

    def output_base(self) -> str:
        if self.args.output_base is None:
            return os.path.splitext(os.path.basename(self.script_path))[0]
        return self.args.output_base

    def make_file(self) -> ScadFile:
        scad_file = ScadFile(detail=self.args.detail)
        for item in self.items:
            scad_file.add_object(resolve_item(item))
        return scad_file

    def run(self) -> int:
        if not self.items:
            print("No models were generated or provided.", file=sys.stderr)
            return 1

        scad_file = self.make_file()
        if self.args.stdout:
            sys.stdout.write(scad_file.get_code())
            return 0

        filename = f"{self.output_base()}.scad"
        log.info(f"Exporting {len(scad_file.objects)} models to SCAD: {filename}")
        try:
            scad_file.write_to_file(filename)
        except PersistFailed as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(f"Exported SCAD: {filename}")
        return 0


def scad_main(
    items: List[ScadItem],
    default_output_base: str | None = None,
    default_detail: int | None = None,
    default_stdout: bool = False,
    argv: List[str] | None = None,
    ) -> int:
    """
    Main entry point for writing scadtree models from a model script.

    Args:
        items: A list containing ScadObjects, ScadElements or functions
               that return them. Each is a top level object of the script.
    """
    # Get the file path of the script that called scad_main
    try:
        calling_frame = inspect.stack()[1]
        script_path = calling_frame.filename
    except IndexError:
        script_path = "unknown_script.py"

    runner = ScadMainRunner(items,
                            script_path,
                            argv=argv,
                            default_output_base=default_output_base,
                            default_detail=default_detail,
                            default_stdout=default_stdout)
    return runner.run()
