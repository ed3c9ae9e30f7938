import click
import csv
import io
import os
import glob
import sys
import traceback
from eaglekit.panelize_ui_sections import (SOURCE_SECTION,
    LAYOUT_SECTION, GUIDES_SECTION, POST_SECTION, DEBUG_SECTION)
from eaglekit.units import readLength, UnitError

PKG_BASE = os.path.dirname(__file__)
PRESETS = os.path.join(PKG_BASE, "resources/panelizePresets")

def splitStr(delimiter, escapeChar, s):
    """
    Splits s based on delimiter that can be escaped via escapeChar
    """
    # Let's use csv reader to implement this
    reader = csv.reader(io.StringIO(s), delimiter=delimiter, escapechar=escapeChar)
    # Unpack first line
    for x in reader:
        return x
    return []


class Section(click.ParamType):
    """
    A CLI argument type for overriding section parameters. Basically a semicolon
    separated list of `key: value` pairs.
    """
    name = "parameter_list"

    def convert(self, value, param, ctx):
        if isinstance(value, dict):
            return value
        if len(value.strip()) == 0:
            self.fail(f"{value} is not a valid argument specification",
                param, ctx)
        pair = value
        try:
            values = {}
            for pair in splitStr(";", "\\", value):
                if len(pair.strip()) == 0:
                    continue
                s = pair.split(":", 1)
                key, value = s[0].strip(), s[1].strip()
                values[key] = value
            return values
        except (TypeError, IndexError):
            self.fail(f"'{pair}' is not a valid key: value pair",
                param,
                ctx)

class Length(click.ParamType):
    """
    A CLI argument type for a length with units, bare numbers are millimeters
    """
    name = "length"

    def convert(self, value, param, ctx):
        if isinstance(value, float):
            return value
        try:
            return readLength(value)
        except UnitError as e:
            self.fail(str(e), param, ctx)


def completePath(prefix, fileSuffix=""):
    paths = []
    for p in glob.glob(prefix + "*"):
        if os.path.isdir(p):
            paths.append(p + "/")
        elif p.endswith(fileSuffix):
            paths.append(p)
    return paths

def pathCompletion(fileSuffix=""):
    def f(ctx, args, incomplete):
        return completePath(incomplete, fileSuffix)
    return f

def completePreset(ctx, args, incomplete):
    presets = [":" + x.replace(".json", "")
        for x in os.listdir(PRESETS)
        if x.endswith(".json") and (x.startswith(incomplete) or x.startswith(incomplete[1:]))]
    if incomplete.startswith(":"):
        return presets
    return presets + completePath(incomplete, ".json")

def completeSection(section):
    def fun(ctx, args, incomplete):
        key = incomplete.split(";")[-1].split(":", 1)[0].strip()
        trimmedIncomplete = incomplete.rsplit(";", 1)[0] + ";" \
                            if ";" in incomplete else ""
        return [trimmedIncomplete + x + ":" for x in section.keys()
            if x.startswith(key)]
    return fun

@click.command()
@click.argument("width", type=Length())
@click.argument("height", type=Length())
@click.argument("input", type=click.Path(dir_okay=False, exists=True),
    shell_complete=pathCompletion(".brd"))
@click.argument("output", type=click.Path(dir_okay=False),
    shell_complete=pathCompletion(".brd"))
@click.option("--preset", "-p", multiple=True,
    help="A panelization preset file; use prefix ':' for built-in styles.",
    shell_complete=completePreset)
@click.option("--source", "-s", type=Section(),
    help="Override source settings.",
    shell_complete=completeSection(SOURCE_SECTION))
@click.option("--layout", "-l", type=Section(),
    help="Override layout settings.",
    shell_complete=completeSection(LAYOUT_SECTION))
@click.option("--guides", "-g", type=Section(),
    help="Override cut guide settings.",
    shell_complete=completeSection(GUIDES_SECTION))
@click.option("--post", "-z", type=Section(),
    help="Override post processing settings.",
    shell_complete=completeSection(POST_SECTION))
@click.option("--debug", type=Section(),
    help="Debugging options.",
    shell_complete=completeSection(DEBUG_SECTION))
@click.option("--dump", "-d", type=click.Path(file_okay=True, dir_okay=False),
    help="Dump constructured preset into a JSON file.")
@click.option("--quiet", "-q", is_flag=True, default=False,
    help="Do not report progress.")
def panelize(width, height, input, output, preset, source, layout, guides,
             post, debug, dump, quiet):
    """
    Panelize an EAGLE board: fill an area of WIDTH x HEIGHT with copies of the
    board from INPUT and save the panel to OUTPUT.
    """
    try:
        # Hide the import in the function to make the startup faster
        from eaglekit import panelize_ui_impl as ki

        preset = ki.obtainPreset(preset, source=source, layout=layout,
            guides=guides, post=post, debug=debug)

        reporter = (lambda x: None) if quiet else click.echo
        doPanelization(input, output, preset, width, height, reporter)

        if (dump):
            with open(dump, "w") as f:
                f.write(ki.dumpPreset(preset))
    except Exception as e:
        sys.stderr.write("An error occurred: " + str(e) + "\n")
        sys.stderr.write("No output files produced\n")
        if isinstance(preset, dict) and preset.get("debug", {}).get("trace"):
            traceback.print_exc(file=sys.stderr)
        sys.exit(1)

def doPanelization(input, output, preset, width, height, reporter=print):
    """
    The panelization logic is separated into a separate function so we can
    handle errors based on the context
    """
    from eaglekit import panelize_ui_impl as ki
    from eaglekit.eagle import loadBoard, saveBoard

    tree = loadBoard(input)
    ki.panelizeBoard(tree, preset, width, height, reporter)
    saveBoard(output, tree)
