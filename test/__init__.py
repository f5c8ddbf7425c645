'''utilities for tests'''

# built-ins
import filecmp
import os
import unittest

# intra-project
import util.file


def assert_equal_contents(testCase, filename1, filename2):
    'Assert contents of two files are equal for a unittest.TestCase'
    testCase.assertTrue(filecmp.cmp(filename1, filename2, shallow=False),
        "%s differs from %s" % (filename1, filename2))


def vcf_row(*fields):
    ''' Build a VCF data row (a list of column strings) from CHROM, POS, REF,
        ALT, INFO, FORMAT and sample fields: ID, QUAL and FILTER are filled in.
    '''
    chrom, pos, ref, alt, info, fmt = fields[:6]
    return [chrom, str(pos), '.', ref, alt, '50', 'PASS', info, fmt] + list(fields[6:])


def vcf_text(*rows):
    ''' Join rows (lists of columns, or header strings) into VCF text. '''
    return ''.join((r if isinstance(r, str) else '\t'.join(r)) + '\n' for r in rows)


class TestCaseWithTmp(unittest.TestCase):
    'Base class for tests that use tempDir'

    @classmethod
    def setUpClass(cls):
        cls._class_tempdir = util.file.set_tmp_dir(cls.__name__)

    def setUp(self):
        util.file.set_tmp_dir(type(self).__name__)

    @classmethod
    def tearDownClass(cls):
        util.file.destroy_tmp_dir(cls._class_tempdir)

    def input(self, fname):
        return os.path.join(util.file.get_test_input_path(self), fname)
