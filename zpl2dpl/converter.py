#!/usr/bin/env python

import argparse
import logging
import re
import sys
from typing import List, NamedTuple, Optional

from .label import Label
from .parser import (QR_FIELD_PREFIX_RE, Cursor, find_field_data, find_label_block,
                     find_stored_graphics, graphic_name, move_cursor, parse)
from .printer import ENCODING, FilePrinter, Printer, TCPPrinter
from .utils import DecodeError, PositionError, decompress_zpl_data

log = logging.getLogger(__name__)

HEX_RE = re.compile(r'^[0-9A-F]*$')


class Diagnostic(NamedTuple):
    '''
    A recoverable problem met while translating.

    kind is one of 'decode', 'resource', 'structure', 'reference', 'position',
    'syntax', 'unsupported' or 'cancelled'; index is the position of the
    offending graphic, command or element, source its opcode, tag or name.
    '''
    kind: str
    index: Optional[int]
    source: str
    message: str


class Translation(NamedTuple):
    script: str
    diagnostics: List[Diagnostic]


def _int_params(command, defaults):
    """
    Reads the leading numeric parameters of *command*; empty or missing ones
    take the value from *defaults*.
    """
    params = command.param_list()
    values = []
    for i, default in enumerate(defaults):
        value = params[i] if i < len(params) else ''
        if value:
            try:
                values.append(int(value))
            except ValueError:
                raise ValueError("invalid parameter %r in ^%s%s"
                                 % (value, command.opcode, command.params))
        else:
            values.append(default)
    return values


class ZplToDplConverter:
    '''
    Converts a ZPL script into a DPL script.

    ~DG graphics are decompressed into DPL image storage, the commands of the
    first ^XA...^XZ block are translated in order. Problems skip the affected
    graphic or command and are reported as diagnostics.
    '''

    def __init__(self, strict=False, config='D11'):
        """
        *strict* makes a corrupt ~DG payload raise DecodeError instead of
        being skipped. *config* is the DPL configuration command.
        """
        self.strict = strict
        self.config = config

    def convert(self, zpl):
        label = Label(config=self.config)
        diagnostics = []

        stored = self._store_graphics(label, zpl, diagnostics)

        block = find_label_block(zpl)
        if block is None:
            log.warning('No ^XA...^XZ label block found')
            diagnostics.append(Diagnostic('structure', None, 'XA',
                                          'no ^XA...^XZ label block'))
        else:
            self._layout(label, parse(block), stored, diagnostics)

        return Translation(label.dumpDPL(), diagnostics)

    def _store_graphics(self, label, zpl, diagnostics):
        stored = set()
        for i, graphic in enumerate(find_stored_graphics(zpl)):
            try:
                data = decompress_zpl_data(graphic.data)
                if not HEX_RE.match(data):
                    raise DecodeError("graphic %s is not hex after decompression"
                                      % graphic.name)
            except DecodeError as e:
                if self.strict:
                    raise
                log.error('Skipping graphic {}: {}'.format(graphic.name, e))
                diagnostics.append(Diagnostic('decode', i, graphic.name, str(e)))
                continue
            label.store_image(graphic.name, data)
            stored.add(graphic.name)
        return stored

    def _layout(self, label, commands, stored, diagnostics):
        cursor = Cursor()

        for i, command in enumerate(commands):
            try:
                cursor = self._emit(label, commands, i, cursor, stored, diagnostics)
            except PositionError as e:
                log.warning('Skipping ^{}: {}'.format(command.opcode, e))
                diagnostics.append(Diagnostic('position', i, command.opcode, str(e)))
            except ValueError as e:
                log.warning('Skipping ^{}: {}'.format(command.opcode, e))
                diagnostics.append(Diagnostic('syntax', i, command.opcode, str(e)))

    def _emit(self, label, commands, i, cursor, stored, diagnostics):
        '''
        translates commands[i] at *cursor* and returns the cursor for the
        next command
        '''
        command = commands[i]
        op = command.opcode

        if op == 'FO':
            return move_cursor(cursor, command)

        if op == 'FD':
            label.write_text(cursor.x, cursor.y, command.params)

        elif op.startswith('B') and op != 'BY':
            j = find_field_data(commands, i)
            if j is None:
                log.warning('^{} has no field data'.format(op))
                diagnostics.append(Diagnostic('reference', i, op,
                                              'barcode without following ^FD'))
                return cursor
            data = commands[j].params
            if op == 'BQ':
                label.barcode(cursor.x, cursor.y, QR_FIELD_PREFIX_RE.sub('', data), 'Q')
            else:
                label.barcode(cursor.x, cursor.y, data, op[1])

        elif op == 'GB':
            width, height, thickness = _int_params(command, [None, None, 1])
            # width and height default to the line thickness
            width = thickness if width is None else width
            height = thickness if height is None else height
            label.draw_box(cursor.x, cursor.y, width, height, thickness)

        elif op == 'GC':
            diameter, thickness = _int_params(command, [3, 1])
            label.draw_circle(cursor.x, cursor.y, diameter, thickness)

        elif op == 'GD':
            width, height, thickness = _int_params(command, [3, 3, 1])
            label.draw_line(cursor.x, cursor.y, width, height, thickness)

        elif op == 'XG':
            name = graphic_name(command.params)
            if name in stored:
                label.recall_image(cursor.x, cursor.y, name)
            else:
                log.warning('^XG recalls unknown graphic {}'.format(name))
                diagnostics.append(Diagnostic('reference', i, op,
                                              'graphic %s was not stored' % name))

        else:
            log.debug('Ignoring ^{}{}'.format(op, command.params))

        return cursor


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='zpl2dpl', description='Convert a ZPL label into a DPL label.')
    parser.add_argument('input', help='ZPL file, - for stdin')
    parser.add_argument('-o', '--output', help='write the DPL job to this file')
    parser.add_argument('--host', help='send the DPL job to this printer')
    parser.add_argument('--port', type=int, default=9100)
    parser.add_argument('--strict', action='store_true',
                        help='fail on corrupt graphic data')
    parser.add_argument('--encoding', default='utf-8',
                        help='encoding of the ZPL file (default utf-8)')
    parser.add_argument('-v', '--verbose', action='store_true')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    if args.input == '-':
        zpl = sys.stdin.read()
    else:
        with open(args.input, encoding=args.encoding) as f:
            zpl = f.read()

    try:
        translation = ZplToDplConverter(strict=args.strict).convert(zpl)
    except DecodeError as e:
        log.error('Conversion failed: {}'.format(e))
        return 1

    try:
        translation.script.encode(ENCODING)
    except UnicodeEncodeError as e:
        log.error('Label text cannot be sent as {}: {}'.format(ENCODING, e))
        return 1

    if args.host:
        printer = TCPPrinter(args.host, args.port)
    elif args.output:
        printer = FilePrinter(args.output)
    else:
        printer = Printer()
    try:
        printer.send_job(translation.script)
    finally:
        printer.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
