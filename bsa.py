#!/usr/bin/env python
''' Bulk segregant analysis (BSA) of multi-sample VCF files: merge individual
    samples into "mut" and "sib" bulks, then score and filter the pooled
    variants for prioritisation.
'''

__commands__ = []

import argparse
import collections
import logging
import re

import util.cmd
import util.file
import util.misc
import util.stats
import util.vcf

log = logging.getLogger(__name__)

POOL_NAMES = ('mut', 'sib')
HET_GENOTYPE = '0/1'
POOLED_FORMAT = 'GT:AD'


# =============================
# ***  munge_vcf_for_bsa    ***
# =============================

class PooledGenotype(collections.namedtuple('PooledGenotype', ['alleles', 'ref_depth', 'alt_depth'])):
    ''' Genotype calls and allele depths merged across the samples of a pool.
        alleles is a dict of allele -> number of times it was called.
    '''

    @property
    def genotype(self):
        if not self.alleles:
            return None
        if len(self.alleles) == 1:
            allele = next(iter(self.alleles))
            return allele + '/' + allele
        return HET_GENOTYPE

    def sample_field(self):
        return '%s:%d,%d' % (self.genotype, self.ref_depth, self.alt_depth)


def pool_samples(samples, sample_idx, gt_idx, ad_idx):
    ''' Merge the sample columns at sample_idx into one PooledGenotype.
        Samples with a missing genotype are left out of the allele tally,
        but their read depths are still added to the pooled depths.
    '''
    called = []
    ref_depth = alt_depth = 0
    for i in sample_idx:
        if i >= len(samples):
            raise util.vcf.VcfFormatError("data line has %d sample columns, expected at least %d" % (len(samples), i + 1))
        alleles = util.vcf.parse_genotype(util.vcf.sample_subfield(samples[i], gt_idx))
        if alleles is not None:
            called.extend(alleles)
        ref, alt = util.vcf.parse_allele_depth(util.vcf.sample_subfield(samples[i], ad_idx))
        ref_depth += ref
        alt_depth += alt
    return PooledGenotype(util.misc.histogram(called), ref_depth, alt_depth)


def munge_record(row, mut_idx, sib_idx):
    ''' Pool one VCF data row (a list of columns) into mut and sib bulks.
        Returns (out_row, None) for a row to keep, or (None, reason) where
        reason names the filter that dropped it.
    '''
    reason = util.vcf.snv_drop_reason(row[3], row[4])
    if reason:
        return (None, reason)

    gt_idx = util.vcf.format_index(row[8], 'GT')
    ad_idx = util.vcf.format_index(row[8], 'AD')
    samples = row[len(util.vcf.VCF_FIXED_COLUMNS):]

    mut = pool_samples(samples, mut_idx, gt_idx, ad_idx)
    if not mut.alleles:
        return (None, 'no_mut_genotype')
    sib = pool_samples(samples, sib_idx, gt_idx, ad_idx)
    if not sib.alleles:
        return (None, 'no_sib_genotype')

    if mut.genotype == '0/0' and sib.genotype == '0/0':
        return (None, 'no_alt_alleles')
    if mut.genotype == '1/1' and sib.genotype == '1/1':
        return (None, 'no_ref_alleles')

    return (row[:8] + [POOLED_FORMAT, mut.sample_field(), sib.sample_field()], None)


def log_filter_counts(counts):
    log.info("%d records kept, %d dropped", counts.get('kept', 0),
        sum(n for reason, n in counts.items() if reason != 'kept'))
    for reason, n in sorted(counts.items()):
        if reason != 'kept':
            log.info("dropped %d records: %s", n, reason)


def munge_vcf_for_bsa(inVcf, outVcf, mut, sib):
    ''' Merge the samples of a VCF file into two bulks, "mut" and "sib", ready
        for bulk segregant analysis. Genotypes and allele depths are merged;
        multiallelic sites, indels, sites without a called genotype in either
        bulk, and sites where both bulks are homozygous for the same allele
        are removed.
    '''
    overlap = set(mut) & set(sib)
    if overlap:
        raise ValueError("samples given as both --mut and --sib: %s" % ', '.join(sorted(overlap)))

    counts = collections.Counter()
    mut_idx = sib_idx = None
    with util.file.open_or_stdin(inVcf) as inf, util.file.open_or_stdout(outVcf) as outf:
        for line in inf:
            if line.startswith('##'):
                outf.write(line.rstrip('\r\n') + '\n')
            elif line.startswith('#CHROM'):
                header = util.vcf.split_row(line)
                names = util.vcf.sample_names(line)
                mut_idx = util.vcf.sample_indices(names, mut)
                sib_idx = util.vcf.sample_indices(names, sib)
                for pool_name, idx in zip(POOL_NAMES, (mut_idx, sib_idx)):
                    if idx:
                        log.debug("%s bulk: %s", pool_name, ', '.join(names[i] for i in idx))
                    else:
                        log.warning("none of the %s samples are in the VCF header", pool_name)
                outf.write('\t'.join(header[:len(util.vcf.VCF_FIXED_COLUMNS)] + list(POOL_NAMES)) + '\n')
            elif line.startswith('#') or not line.strip():
                continue
            else:
                if mut_idx is None:
                    raise util.vcf.VcfFormatError("data line found before the #CHROM header line")
                out_row, reason = munge_record(util.vcf.split_row(line), mut_idx, sib_idx)
                counts[reason or 'kept'] += 1
                if out_row:
                    outf.write('\t'.join(out_row) + '\n')
    log_filter_counts(counts)
    return 0


def parser_munge_vcf_for_bsa(parser=argparse.ArgumentParser()):
    parser.add_argument('inVcf', nargs='?', default='-',
        help='Input VCF file, optionally gzipped ("-" for stdin, the default).')
    parser.add_argument('outVcf', nargs='?', default='-',
        help='Output VCF file with "mut" and "sib" sample columns ("-" for stdout, the default).')
    parser.add_argument('--mut', nargs='+', required=True, metavar='SAMPLE',
        help='The "mut" samples to be combined into one sample.')
    parser.add_argument('--sib', nargs='+', required=True, metavar='SAMPLE',
        help='The "sib" samples to be combined into one sample.')
    util.cmd.common_args(parser, (('loglevel', 'INFO'), ('version', None)))
    util.cmd.attach_main(parser, munge_vcf_for_bsa, split_args=True)
    return parser
__commands__.append(('munge_vcf_for_bsa', parser_munge_vcf_for_bsa))


# =============================
# ***  reformat_bsa_vcf     ***
# =============================

# Ensembl consequence terms, see
# https://www.ensembl.org/info/genome/variation/prediction/predicted_data.html
IMPACT_TERMS = {
    'high': ('transcript_ablation', 'splice_acceptor_variant', 'splice_donor_variant',
             'stop_gained', 'frameshift_variant', 'stop_lost', 'start_lost',
             'transcript_amplification'),
    'moderate': ('inframe_insertion', 'inframe_deletion', 'protein_altering_variant'),
}
# SIFT prediction that promotes a missense_variant into each impact class
MISSENSE_PREDICTION = {
    'high': 'deleterious',
    'moderate': 'tolerated',
}
NO_CONSEQUENCE = '.'


def consequence_filter(impact=None):
    ''' Return a predicate on consequence strings that is true for those of
        the given impact ('high' or 'moderate'), or for all of them if impact
        is None.
    '''
    if impact is None:
        return lambda csq: True
    if impact not in IMPACT_TERMS:
        raise ValueError("unknown impact %r" % impact)
    term_re = re.compile(r'\b(%s)\b' % '|'.join(IMPACT_TERMS[impact]))
    missense_re = re.compile(r'missense_variant.*%s' % MISSENSE_PREDICTION[impact])
    def keep(csq):
        return bool(term_re.search(csq) or missense_re.search(csq))
    return keep


class BulkDepths(collections.namedtuple('BulkDepths', ['mut_ref', 'mut_alt', 'sib_ref', 'sib_alt'])):
    ''' Pooled read depths of a BSA variant. '''

    def g_statistic(self):
        # rows: alt, ref; columns: mut, sib
        return util.stats.g_statistic([[self.mut_alt, self.sib_alt],
                                       [self.mut_ref, self.sib_ref]])


def score_record(row):
    ''' Check one pooled VCF data row and compute its G statistic.
        Returns ((depths, G), None) for a row to keep, or (None, reason).
    '''
    reason = util.vcf.snv_drop_reason(row[3], row[4])
    if reason:
        return (None, reason)

    ad_idx = util.vcf.format_index(row[8], 'AD')
    mut_ref, mut_alt = util.vcf.parse_allele_depth(util.vcf.sample_subfield(row[9], ad_idx))
    sib_ref, sib_alt = util.vcf.parse_allele_depth(util.vcf.sample_subfield(row[10], ad_idx))
    mut_total = mut_ref + mut_alt
    sib_total = sib_ref + sib_alt
    if mut_total == 0:
        return (None, 'no_mut_reads')
    if sib_total == 0:
        return (None, 'no_sib_reads')
    # sib_alt/sib_total >= mut_alt/mut_total, compared without division
    if sib_alt * mut_total >= mut_alt * sib_total:
        return (None, 'not_enriched')

    depths = BulkDepths(mut_ref, mut_alt, sib_ref, sib_alt)
    return ((depths, depths.g_statistic()), None)


def report_rows(row, depths, g, keep_csq):
    ''' Yield one tab-separated report line per consequence of row that
        passes keep_csq.
    '''
    consequences = util.vcf.info_consequences(row[7]) or [NO_CONSEQUENCE]
    for csq in consequences:
        if keep_csq(csq):
            yield '%s:%s\t%s/%s\t%s\t%s\t%d/%d\t%d/%d\t%.1f\n' % (
                row[0], row[1], row[3], row[4], row[5], csq,
                depths.mut_ref, depths.mut_alt, depths.sib_ref, depths.sib_alt, g)


def reformat_bsa_vcf(inVcf, outFile, impact=None):
    ''' Reformat a VCF produced by munge_vcf_for_bsa into a table for easier
        prioritisation. Each variant where the "mut" bulk is enriched for the
        alternate allele relative to the "sib" bulk is scored with a G-test
        and reported once per (optionally impact-filtered) VEP consequence.
    '''
    keep_csq = consequence_filter(impact)
    counts = collections.Counter()
    with util.file.open_or_stdin(inVcf) as inf, util.file.open_or_stdout(outFile) as outf:
        for line in inf:
            if line.startswith('#') or not line.strip():
                continue
            row = util.vcf.split_row(line, min_columns=len(util.vcf.VCF_FIXED_COLUMNS) + len(POOL_NAMES))
            scored, reason = score_record(row)
            counts[reason or 'kept'] += 1
            if scored:
                depths, g = scored
                outf.writelines(report_rows(row, depths, g, keep_csq))
    log_filter_counts(counts)
    return 0


def parser_reformat_bsa_vcf(parser=argparse.ArgumentParser()):
    parser.add_argument('inVcf', nargs='?', default='-',
        help='Input VCF file from munge_vcf_for_bsa ("-" for stdin, the default).')
    parser.add_argument('outFile', nargs='?', default='-',
        help='Output tab-separated report ("-" for stdout, the default).')
    impact = parser.add_mutually_exclusive_group()
    impact.add_argument('--high', dest='impact', action='store_const', const='high',
        help='Only include variants that have a high impact consequence.')
    impact.add_argument('--moderate', dest='impact', action='store_const', const='moderate',
        help='Only include variants that have a moderate impact consequence.')
    util.cmd.common_args(parser, (('loglevel', 'INFO'), ('version', None)))
    util.cmd.attach_main(parser, reformat_bsa_vcf, split_args=True)
    return parser
__commands__.append(('reformat_bsa_vcf', parser_reformat_bsa_vcf))


# =======================
def full_parser():
    return util.cmd.make_parser(__commands__, __doc__)


if __name__ == '__main__':
    util.cmd.main_argparse(__commands__, __doc__)
