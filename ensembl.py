#!/usr/bin/env python
''' Utilities for querying Ensembl core databases.
'''

__commands__ = []

import argparse
import logging
import re

import util.cmd
import util.file

log = logging.getLogger(__name__)

DEFAULT_SPECIES = 'Danio rerio'
DEFAULT_DBHOST = 'ensembldb.ensembl.org'
DEFAULT_DBPORT = 3306
DEFAULT_DBUSER = 'anonymous'

CANONICAL_TRANSCRIPTS_SQL = '''
    SELECT g.stable_id, t.stable_id
    FROM gene g
    JOIN transcript t ON t.transcript_id = g.canonical_transcript_id
    ORDER BY g.gene_id
'''


def core_db_prefix(species):
    ''' "Danio rerio" -> "danio_rerio_core_" '''
    return re.sub(r'\W+', '_', species.strip().lower()) + '_core_'


def parse_core_db_name(db_name, prefix):
    ''' Return (release, assembly) from a core database name such as
        danio_rerio_core_110_11, or None if it is not a core database of the
        species.
    '''
    m = re.match(re.escape(prefix) + r'(\d+)_(\d+)\w*$', db_name)
    if not m:
        return None
    return (int(m.group(1)), int(m.group(2)))


def choose_core_db(db_names, species, release=None):
    ''' Pick the core database of a species from a list of database names:
        the requested release, or else the newest one.
    '''
    prefix = core_db_prefix(species)
    candidates = []
    for db_name in db_names:
        version = parse_core_db_name(db_name, prefix)
        if version and (release is None or version[0] == release):
            candidates.append((version, db_name))
    if not candidates:
        raise LookupError("no Ensembl core database found for %s%s" % (
            species, '' if release is None else ' release %d' % release))
    return max(candidates)[1]


class EnsemblCoreDb(object):
    ''' Read-only access to one species' Ensembl core database over a DB-API
        connection. Use connect() to open one with MySQLdb.
    '''

    def __init__(self, conn, species=DEFAULT_SPECIES, release=None, server_side_cursor=None):
        self.conn = conn
        self.server_side_cursor = server_side_cursor
        cur = self.conn.cursor()
        try:
            cur.execute("SHOW DATABASES LIKE %s", (core_db_prefix(species) + '%',))
            db_names = [row[0] for row in cur.fetchall()]
        finally:
            cur.close()
        self.db_name = choose_core_db(db_names, species, release)
        self.release = parse_core_db_name(self.db_name, core_db_prefix(species))[0]
        self.conn.select_db(self.db_name)
        log.info("using %s (genebuild version e%d)", self.db_name, self.release)

    @classmethod
    def connect(cls, host=DEFAULT_DBHOST, port=DEFAULT_DBPORT, user=DEFAULT_DBUSER, password=None,
                species=DEFAULT_SPECIES, release=None):
        import MySQLdb
        import MySQLdb.cursors
        kwargs = dict(host=host, port=port, user=user)
        if password:
            kwargs['passwd'] = password
        log.debug("connecting to %s@%s:%s", user, host, port)
        return cls(MySQLdb.connect(**kwargs), species=species, release=release,
                   server_side_cursor=MySQLdb.cursors.SSCursor)

    def close(self):
        self.conn.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def canonical_transcripts(self):
        ''' Yield (gene stable ID, canonical transcript stable ID) for every
            gene, streaming rows from the server.
        '''
        if self.server_side_cursor:
            cur = self.conn.cursor(self.server_side_cursor)
        else:
            cur = self.conn.cursor()
        try:
            cur.execute(CANONICAL_TRANSCRIPTS_SQL)
            for gene_id, transcript_id in cur:
                yield (gene_id, transcript_id)
        finally:
            cur.close()


def write_canonical_transcripts(db, outf):
    n = 0
    for gene_id, transcript_id in db.canonical_transcripts():
        outf.write('%s\t%s\n' % (gene_id, transcript_id))
        n += 1
    log.info("wrote %d genes", n)
    return n


def dump_canonical_transcripts(outFile, species=DEFAULT_SPECIES, ensembl_dbhost=DEFAULT_DBHOST,
                               ensembl_dbport=DEFAULT_DBPORT, ensembl_dbuser=DEFAULT_DBUSER,
                               ensembl_dbpass=None, ensembl_version=None):
    ''' Dump a list of Ensembl gene stable IDs along with the stable ID of
        each gene's canonical transcript.
    '''
    with EnsemblCoreDb.connect(host=ensembl_dbhost, port=ensembl_dbport, user=ensembl_dbuser,
                               password=ensembl_dbpass, species=species, release=ensembl_version) as db:
        with util.file.open_or_stdout(outFile) as outf:
            write_canonical_transcripts(db, outf)
    return 0


def parser_dump_canonical_transcripts(parser=argparse.ArgumentParser()):
    parser.add_argument('outFile', nargs='?', default='-',
        help='Output tab-separated file ("-" for stdout, the default).')
    parser.add_argument('--species', default=DEFAULT_SPECIES,
        help='Species. [default: %(default)s]')
    parser.add_argument('--ensembl_dbhost', default=DEFAULT_DBHOST,
        help='Ensembl MySQL database host. [default: %(default)s]')
    parser.add_argument('--ensembl_dbport', type=int, default=DEFAULT_DBPORT,
        help='Ensembl MySQL database port. [default: %(default)s]')
    parser.add_argument('--ensembl_dbuser', default=DEFAULT_DBUSER,
        help='Ensembl MySQL database username. [default: %(default)s]')
    parser.add_argument('--ensembl_dbpass', default=None,
        help='Ensembl MySQL database password.')
    parser.add_argument('--ensembl_version', type=int, default=None,
        help='Ensembl release to use. [default: the newest available]')
    util.cmd.common_args(parser, (('loglevel', 'INFO'), ('version', None)))
    util.cmd.attach_main(parser, dump_canonical_transcripts, split_args=True)
    return parser
__commands__.append(('dump_canonical_transcripts', parser_dump_canonical_transcripts))


# =======================
def full_parser():
    return util.cmd.make_parser(__commands__, __doc__)


if __name__ == '__main__':
    util.cmd.main_argparse(__commands__, __doc__)
