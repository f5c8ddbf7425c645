#!/usr/bin/env python
"""
Utilities for dealing with files.
"""

__commands__ = []

import argparse
import csv
import logging

import util.cmd
import util.file

log = logging.getLogger(__name__)


# ==============================
# ***  two_col_to_upset      ***
# ==============================

def read_set_membership(inf):
    ''' Read whitespace-separated "set id" lines into a dict of
        id -> set of set names.
    '''
    members = {}
    for line_num, line in enumerate(inf, start=1):
        fields = line.split()
        if not fields:
            continue
        if len(fields) < 2:
            raise ValueError("line %d: expected two columns (set, id), found %r" % (line_num, line.rstrip('\r\n')))
        set_name, item_id = fields[:2]
        members.setdefault(item_id, set()).add(set_name)
    return members


def upset_matrix(members):
    ''' Yield the rows of an UpSet membership matrix: a header row
        ("Gene", then the sorted set names) followed by one row per sorted
        id with 1/0 membership flags.
    '''
    set_names = sorted(set().union(*members.values())) if members else []
    yield ['Gene'] + set_names
    for item_id in sorted(members):
        yield [item_id] + [1 if s in members[item_id] else 0 for s in set_names]


def two_col_to_upset(inFile, outFile):
    ''' Convert two column input (sets and IDs) into the CSV membership
        matrix format required by UpSet.
    '''
    with util.file.open_or_stdin(inFile) as inf:
        members = read_set_membership(inf)
    log.info("read %d ids", len(members))
    with util.file.open_or_stdout(outFile, newline='') as outf:
        writer = csv.writer(outf, lineterminator='\r\n')
        writer.writerows(upset_matrix(members))
    return 0


def parser_two_col_to_upset(parser=argparse.ArgumentParser()):
    parser.add_argument('inFile', nargs='?', default='-',
        help='Input with one "set id" pair per line, whitespace-separated ("-" for stdin, the default).')
    parser.add_argument('outFile', nargs='?', default='-',
        help='Output CSV file ("-" for stdout, the default).')
    util.cmd.common_args(parser, (('loglevel', 'INFO'), ('version', None)))
    util.cmd.attach_main(parser, two_col_to_upset, split_args=True)
    return parser
__commands__.append(('two_col_to_upset', parser_two_col_to_upset))


# =======================
def full_parser():
    return util.cmd.make_parser(__commands__, __doc__)


if __name__ == '__main__':
    util.cmd.main_argparse(__commands__, __doc__)
