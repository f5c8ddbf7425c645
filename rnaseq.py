#!/usr/bin/env python
''' RNA-Seq differential expression: split a counts matrix into one DESeq2
    analysis per condition comparison and run each one, under LSF or locally.
'''

__commands__ = []

import argparse
import collections
import csv
import logging
import os
import os.path
import re

import pandas

import tools.lsf
import tools.rscript
import util.cmd
import util.file

log = logging.getLogger(__name__)

DEFAULT_MEMORY_MB = 4000

Sample = collections.namedtuple('Sample', ['name', 'condition', 'group'])


class Comparison(collections.namedtuple('Comparison', ['exp_name', 'con_name', 'rename'])):
    ''' One DESeq2 contrast. rename maps each condition taking part to the
        name of its side (exp_name or con_name).
    '''

    @property
    def name(self):
        return self.exp_name + '_vs_' + self.con_name


def read_samples(samples_file):
    ''' Read a DESeq2 samples file: a header line, then tab-separated
        sample, condition and optional group columns.
    '''
    samples = []
    with open(samples_file, 'rt') as inf:
        reader = csv.reader(inf, delimiter='\t')
        next(reader, None)
        for row in reader:
            if not row or not row[0]:
                continue
            if len(row) < 2:
                raise ValueError("%s: sample %s has no condition" % (samples_file, row[0]))
            group = row[2] if len(row) > 2 and row[2] else None
            samples.append(Sample(row[0], row[1], group))
    return samples


def common_condition_prefix(conditions):
    ''' The prefix shared by all conditions, cut back to its last word
        separator ("_", "-", "." or space) so that only whole words are
        removed. Empty if there are fewer than two conditions.
    '''
    conditions = list(conditions)
    if len(conditions) < 2:
        return ''
    prefix = os.path.commonprefix(conditions)
    m = re.match(r'.*[_\-. ]', prefix)
    return m.group(0) if m else ''


def strip_condition_prefix(samples):
    prefix = common_condition_prefix(set(s.condition for s in samples))
    if prefix:
        log.debug("removing common prefix %r from conditions", prefix)
    return [s._replace(condition=s.condition[len(prefix):]) for s in samples]


def default_comparisons(conditions):
    ''' Guess comparisons from condition names ending in wt, het, hom, sib or
        mut.
    '''
    conditions = sorted(set(conditions))
    if len(conditions) == 1:
        raise ValueError("Only one condition (%s)" % conditions[0])

    def find(genotype):
        matches = [c for c in conditions if re.search(r'(\b|_)%s\Z' % genotype, c)]
        return matches[0] if matches else None
    wt, het, hom, sib, mut = map(find, ('wt', 'het', 'hom', 'sib', 'mut'))

    if len(conditions) == 2:
        if wt and het:
            return ['%s:%s' % (het, wt)]
        if wt and hom:
            return ['%s:%s' % (hom, wt)]
        if het and hom:
            return ['%s:%s' % (hom, het)]
        if sib and mut:
            return ['%s:%s' % (mut, sib)]
    elif len(conditions) == 3 and wt and het and hom:
        return ['%s:%s' % (het, wt),
                '%s:%s' % (hom, wt),
                '%s:%s' % (hom, het),
                '%s:%s,%s' % (hom, het, wt),
                '%s,%s:%s' % (hom, het, wt)]
    return []


def parse_comparison(comparison, known_conditions):
    ''' Parse "exp[=name]:con[=name]", where exp and con are comma-separated
        lists of conditions, into a Comparison.
    '''
    sides = comparison.split(':')
    if not sides[0]:
        raise ValueError("Experimental condition missing from %s" % comparison)
    if len(sides) < 2 or not sides[1]:
        raise ValueError("Control condition missing from %s" % comparison)

    rename = {}
    names = []
    for side in sides[:2]:
        conditions, _, name = side.partition('=')
        name = name or conditions.replace(',', '_')
        for condition in conditions.split(','):
            if condition not in known_conditions:
                raise ValueError("Unknown condition (%s) in %s" % (condition, comparison))
            rename[condition] = name
        names.append(name)
    return Comparison(names[0], names[1], rename)


def comparison_samples(samples, comparison, remove_other_conditions=False):
    ''' (sample, condition) pairs for one comparison. Conditions outside the
        comparison keep their own name, or are removed entirely.
    '''
    out = []
    for s in samples:
        if s.condition in comparison.rename:
            out.append((s, comparison.rename[s.condition]))
        elif not remove_other_conditions:
            out.append((s, s.condition))
    return out


def write_samples_file(out_file, pairs, with_groups):
    with open(out_file, 'wt') as outf:
        outf.write('\tcondition%s\n' % ('\tgroup' if with_groups else ''))
        for s, condition in pairs:
            row = [s.name, condition]
            if with_groups:
                row.append(s.group or '')
            outf.write('\t'.join(row) + '\n')


def read_counts(counts_file):
    ''' Read a counts matrix (genes x samples), keeping values as text. '''
    counts = pandas.read_csv(counts_file, sep='\t', index_col=0, dtype=str, keep_default_na=False)
    counts.index.name = None
    return counts


def write_counts_file(out_file, counts, sample_names):
    missing = [s for s in sample_names if s not in counts.columns]
    if missing:
        raise ValueError("samples missing from counts file: %s" % ', '.join(missing))
    counts[list(sample_names)].to_csv(out_file, sep='\t')


DESEQ2_R_TEMPLATE = '''suppressWarnings(library(tcltk))
suppressPackageStartupMessages(library(DESeq2))
suppressPackageStartupMessages(library(RColorBrewer))
suppressPackageStartupMessages(library(gplots))
countData <- read.table( "{counts_file}", header=TRUE, row.names=1, check.names=FALSE )
samples <- read.table( "{samples_file}", header=TRUE, row.names=1 )
dds <- DESeqDataSetFromMatrix(countData, samples, design = ~ {design})
dds <- DESeq(dds)
write.table(sizeFactors(dds), file="{dir}/size-factors.txt", col.names=FALSE, quote=FALSE, sep="\\t")
write.table(counts(dds, normalized=TRUE), file="{dir}/normalised-counts.txt", col.names=FALSE, quote=FALSE, sep="\\t")
res <- results(dds, contrast=c("condition", "{exp_name}", "{con_name}"))
out <- data.frame(pvalue=res$pvalue, padj=res$padj, log2fc=res$log2FoldChange, row.names=rownames(res))
write.table(out, file="{dir}/output.txt", col.names=FALSE, row.names=TRUE, quote=FALSE, sep="\\t")
pdf("{dir}/qc.pdf")
plotMA(dds)
rld <- rlogTransformation(dds, blind=TRUE)
select <- order(rowMeans(counts(dds, normalized=TRUE)), decreasing=TRUE)[1:30]
hmcol <- colorRampPalette(brewer.pal(9, "GnBu"))(100)
heatmap.2(assay(rld)[select,], col = hmcol, Rowv = FALSE, Colv = FALSE, scale="none", dendrogram="none", trace="none", margin=c(10, 6))
heatmap.2(as.matrix(dist(t(assay(rld)))), trace="none", col = rev(hmcol), margin=c(13, 13))
print(plotPCA(rld, intgroup=c("condition")))
plotDispEsts(dds)
dev.off()
file.create("{done_file}")
quit()
'''


def write_r_script(out_file, comparison, out_dir, counts_file, samples_file, with_groups):
    with open(out_file, 'wt') as outf:
        outf.write(DESEQ2_R_TEMPLATE.format(
            counts_file=counts_file,
            samples_file=samples_file,
            design='group + condition' if with_groups else 'condition',
            dir=out_dir,
            exp_name=comparison.exp_name,
            con_name=comparison.con_name,
            done_file=out_dir + '.done'))


def run_deseq2(counts_file, samples_file, output_dir, comparisons=None,
               remove_other_conditions=False, memory=DEFAULT_MEMORY_MB, local=False):
    ''' Run DESeq2 on RNA-Seq counts for each comparison of conditions.
        Each comparison gets its own directory under output_dir containing
        its counts, samples and R script; comparisons whose directory has a
        matching .done file are skipped. Scripts are submitted with bsub,
        or run directly with Rscript if local is set.
    '''
    samples = strip_condition_prefix(read_samples(samples_file))
    conditions = set(s.condition for s in samples)
    with_groups = any(s.group for s in samples)

    comparisons = comparisons or default_comparisons(conditions)
    if not comparisons:
        log.warning("no comparisons given and none could be inferred from conditions: %s", ', '.join(sorted(conditions)))
        return 0
    comparisons = [parse_comparison(c, conditions) for c in comparisons]

    counts = read_counts(counts_file)
    log.info("read counts for %d genes and %d samples", len(counts.index), len(counts.columns))

    for comparison in comparisons:
        out_dir = os.path.join(output_dir, comparison.name)
        if os.path.exists(out_dir + '.done'):
            log.info("skipping %s, already done", comparison.name)
            continue
        util.file.mkdir_p(out_dir)

        pairs = comparison_samples(samples, comparison, remove_other_conditions)
        new_samples_file = os.path.join(out_dir, 'samples.txt')
        new_counts_file = os.path.join(out_dir, 'counts.txt')
        r_script = os.path.join(out_dir, 'deseq2.R')
        write_samples_file(new_samples_file, pairs, with_groups)
        write_counts_file(new_counts_file, counts, [s.name for s, _ in pairs])
        write_r_script(r_script, comparison, out_dir, new_counts_file, new_samples_file, with_groups)

        log.info("running %s", r_script)
        if local:
            tools.rscript.RscriptTool().execute(r_script)
        else:
            tools.lsf.LsfTool().execute([tools.rscript.TOOL_NAME, r_script],
                os.path.join(out_dir, 'deseq2.o'), os.path.join(out_dir, 'deseq2.e'),
                memory_mb=memory, job_name='deseq2_' + comparison.name)
    return 0


def parser_run_deseq2(parser=argparse.ArgumentParser()):
    parser.add_argument('--counts_file', default='deseq2/counts.txt',
        help='RNA-Seq counts file. [default: %(default)s]')
    parser.add_argument('--samples_file', default='deseq2/samples.txt',
        help='''DESeq2 samples file. The order of samples in the samples file
            determines the order of the columns in the output. [default: %(default)s]''')
    parser.add_argument('--output_dir', default='deseq2',
        help='Directory in which to create output directories. [default: %(default)s]')
    parser.add_argument('--comparisons', nargs='*', default=None, metavar='COMPARISON',
        help='''Condition comparisons. Each comparison is a pair of experimental and
            control conditions (in that order) separated by a colon (e.g. hom:wt). If
            multiple conditions are to be combined then separate them with a comma
            (e.g. hom:wt,het). To rename a condition, append an equals sign
            (e.g. hom=mut:het,wt=sib). By default, comparisons are guessed from
            wt/het/hom or sib/mut condition names.''')
    parser.add_argument('--remove_other_conditions', action='store_true', default=False,
        help='Remove other conditions from the counts file prior to running DESeq2.')
    parser.add_argument('--memory', type=int, default=DEFAULT_MEMORY_MB,
        help='Memory (MB) to request from LSF for each job. [default: %(default)s]')
    parser.add_argument('--local', action='store_true', default=False,
        help='Run Rscript directly instead of submitting jobs with bsub.')
    util.cmd.common_args(parser, (('loglevel', None), ('version', None)))
    util.cmd.attach_main(parser, run_deseq2, split_args=True)
    return parser
__commands__.append(('run_deseq2', parser_run_deseq2))


# =======================
def full_parser():
    return util.cmd.make_parser(__commands__, __doc__)


if __name__ == '__main__':
    util.cmd.main_argparse(__commands__, __doc__)
