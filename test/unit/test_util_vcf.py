# Unit tests for util.vcf

import unittest

import util.vcf


class TestSplitRow(unittest.TestCase):

    def test_strips_line_ending(self):
        row = util.vcf.split_row('chr1\t10\t.\tA\tC\t50\tPASS\t.\tGT:AD\r\n')
        self.assertEqual(row[0], 'chr1')
        self.assertEqual(row[-1], 'GT:AD')
        self.assertEqual(len(row), 9)

    def test_too_few_columns(self):
        self.assertRaises(util.vcf.VcfFormatError, util.vcf.split_row, 'chr1\t10\t.\tA\tC\n')
        self.assertRaises(util.vcf.VcfFormatError,
            util.vcf.split_row, 'chr1\t10\t.\tA\tC\t50\tPASS\t.\tGT:AD\t0/1\n', min_columns=11)


class TestSampleNames(unittest.TestCase):

    def test_sample_names(self):
        header = '#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\tM1\tS1\tM2\n'
        self.assertEqual(util.vcf.sample_names(header), ['M1', 'S1', 'M2'])

    def test_sites_only(self):
        header = '#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\n'
        self.assertEqual(util.vcf.sample_names(header), [])

    def test_not_a_header(self):
        self.assertRaises(util.vcf.VcfFormatError, util.vcf.sample_names, '##fileformat=VCFv4.2\n')

    def test_indices_in_header_order(self):
        names = ['M1', 'S1', 'M2', 'S2']
        self.assertEqual(util.vcf.sample_indices(names, ['M2', 'M1']), [0, 2])
        self.assertEqual(util.vcf.sample_indices(names, ['S2', 'X9']), [3])
        self.assertEqual(util.vcf.sample_indices(names, []), [])


class TestSnvDropReason(unittest.TestCase):

    def test_snv(self):
        self.assertIsNone(util.vcf.snv_drop_reason('A', 'C'))

    def test_multiallelic(self):
        self.assertEqual(util.vcf.snv_drop_reason('A', 'C,T'), 'multiallelic')
        self.assertEqual(util.vcf.snv_drop_reason('AT', 'A,ATT'), 'multiallelic')

    def test_indel(self):
        self.assertEqual(util.vcf.snv_drop_reason('AT', 'A'), 'indel')
        self.assertEqual(util.vcf.snv_drop_reason('A', 'AT'), 'indel')
        self.assertEqual(util.vcf.snv_drop_reason('AT', 'GC'), 'indel')


class TestSampleFields(unittest.TestCase):

    def test_format_index(self):
        self.assertEqual(util.vcf.format_index('GT:AD:DP', 'GT'), 0)
        self.assertEqual(util.vcf.format_index('GT:AD:DP', 'AD'), 1)
        self.assertRaises(util.vcf.VcfFormatError, util.vcf.format_index, 'GT:DP', 'AD')

    def test_sample_subfield(self):
        self.assertEqual(util.vcf.sample_subfield('0/1:3,4:7', 1), '3,4')
        self.assertEqual(util.vcf.sample_subfield('./.', 1), '.')
        self.assertEqual(util.vcf.sample_subfield('.', 0), '.')


class TestParseGenotype(unittest.TestCase):

    def test_unphased(self):
        self.assertEqual(util.vcf.parse_genotype('0/1'), ['0', '1'])

    def test_phased(self):
        self.assertEqual(util.vcf.parse_genotype('1|1'), ['1', '1'])

    def test_haploid(self):
        self.assertEqual(util.vcf.parse_genotype('1'), ['1'])

    def test_missing(self):
        self.assertIsNone(util.vcf.parse_genotype('./.'))
        self.assertIsNone(util.vcf.parse_genotype('.'))
        self.assertIsNone(util.vcf.parse_genotype('.|1'))
        self.assertIsNone(util.vcf.parse_genotype(''))

    def test_partial(self):
        self.assertEqual(util.vcf.parse_genotype('0/.'), ['0', '.'])
        self.assertEqual(util.vcf.parse_genotype('1|.'), ['1', '.'])


class TestParseAlleleDepth(unittest.TestCase):

    def test_depths(self):
        self.assertEqual(util.vcf.parse_allele_depth('12,3'), (12, 3))

    def test_missing(self):
        self.assertEqual(util.vcf.parse_allele_depth('.'), (0, 0))
        self.assertEqual(util.vcf.parse_allele_depth('.,4'), (0, 4))

    def test_malformed(self):
        for ad in ('12', '1,2,3', 'a,2', '1.5,2', '-1,2'):
            self.assertRaises(util.vcf.VcfFormatError, util.vcf.parse_allele_depth, ad)


class TestInfoConsequences(unittest.TestCase):

    def test_csq(self):
        self.assertEqual(util.vcf.info_consequences('DP=10;CSQ=A|x|HIGH,A|y|LOW;AF=0.5'),
            ['A|x|HIGH', 'A|y|LOW'])

    def test_csq_last(self):
        self.assertEqual(util.vcf.info_consequences('CSQ=A|x|HIGH'), ['A|x|HIGH'])

    def test_last_csq_wins(self):
        self.assertEqual(util.vcf.info_consequences('CSQ=A|x;CSQ=A|y'), ['A|y'])

    def test_no_csq(self):
        self.assertIsNone(util.vcf.info_consequences('DP=10;AF=0.5'))
        self.assertIsNone(util.vcf.info_consequences('.'))
