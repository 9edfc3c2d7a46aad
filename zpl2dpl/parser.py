#!/usr/bin/env python

import re
from typing import List, NamedTuple, Optional

# ~DG<device>:<name>.GRF,<total bytes>,<bytes per row>,<data>
STORED_GRAPHIC_RE = re.compile(
    r'~DG(?:[A-Z]:)?(\w+)(?:\.GRF)?,(\d+),(\d+),([A-Za-z0-9\n\r]+)')
LABEL_BLOCK_RE = re.compile(r'\^XA([\s\S]*?)\^XZ')
COMMAND_RE = re.compile(r'\^([A-Z0-9]{2})([^\^~]*)')
# field data of a ^BQ barcode starts with error correction and input mode
QR_FIELD_PREFIX_RE = re.compile(r'^[HQML][AM],')


class ParsedCommand(NamedTuple):
    opcode: str
    params: str
    offset: int

    def param_list(self):
        return [p.strip() for p in self.params.split(',')]


class Cursor(NamedTuple):
    """Field origin carried forward until the next ^FO."""
    x: float = 0
    y: float = 0


class StoredGraphic(NamedTuple):
    name: str
    total_bytes: int
    bytes_per_row: int
    data: str


def graphic_name(reference: str) -> str:
    """
    Reduces a ZPL object reference like 'R:LOGO.GRF,1,1' to the logical
    image name 'LOGO'.
    """
    name = reference.split(',')[0].strip()
    if ':' in name:
        name = name.split(':', 1)[1]
    if name.upper().endswith('.GRF'):
        name = name[:-4]
    return name


def find_stored_graphics(zpl: str) -> List[StoredGraphic]:
    """
    Returns every ~DG download graphic of *zpl* in document order, with the
    line breaks removed from the still compressed payload.
    """
    return [StoredGraphic(m.group(1), int(m.group(2)), int(m.group(3)),
                          re.sub(r'[\r\n]', '', m.group(4)))
            for m in STORED_GRAPHIC_RE.finditer(zpl)]


def find_label_block(zpl: str) -> Optional[str]:
    """Returns the content between the first ^XA and its ^XZ, or None."""
    m = LABEL_BLOCK_RE.search(zpl)
    if m is None:
        return None
    return m.group(1)


def parse(label_block: str) -> List[ParsedCommand]:
    '''
    tokenizes a label block into commands

    a command is '^' and a two character opcode; its parameters run up to the
    next '^' or '~'. Every command is returned, known or not, so that index
    based lookups over the list stay correct.
    '''
    return [ParsedCommand(m.group(1), m.group(2), m.start())
            for m in COMMAND_RE.finditer(label_block)]


def find_field_data(commands: List[ParsedCommand], index: int) -> Optional[int]:
    """
    Returns the index of the first ^FD after commands[index], or None when the
    block ends first.
    """
    offset = commands[index].offset
    for i in range(index + 1, len(commands)):
        if commands[i].opcode == 'FD' and commands[i].offset > offset:
            return i
    return None


def move_cursor(cursor: Cursor, command: ParsedCommand) -> Cursor:
    '''
    returns the cursor set by a ^FOx,y command

    x is the first and y the second parameter; missing values keep the
    current coordinate as ZPL does. Fractions are kept and rounded when
    the position is written.
    '''
    params = command.param_list()
    x = params[0] if params else ''
    y = params[1] if len(params) > 1 else ''
    try:
        return Cursor(float(x) if x else cursor.x,
                      float(y) if y else cursor.y)
    except ValueError:
        raise ValueError("invalid field origin ^FO%s" % command.params)
