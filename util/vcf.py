'''This gives a number of useful quick methods for dealing with the text
fields of VCF files. Only the subset of VCF used by our scripts is handled:
tab-separated data lines, colon-delimited FORMAT/sample fields, the GT and
AD sub-fields and the VEP-style CSQ entry of INFO.
'''

import logging
import re

log = logging.getLogger(__name__)

VCF_FIXED_COLUMNS = ('CHROM', 'POS', 'ID', 'REF', 'ALT', 'QUAL', 'FILTER', 'INFO', 'FORMAT')
MISSING = '.'


class VcfFormatError(ValueError):
    '''Indicates a malformed VCF line or sub-field that we cannot interpret.'''
    pass


def split_row(line, min_columns=len(VCF_FIXED_COLUMNS)):
    ''' Split a VCF data line into its tab-separated columns, stripping the
        line ending. Raises VcfFormatError if there are fewer than
        min_columns columns.
    '''
    row = line.rstrip('\r\n').split('\t')
    if len(row) < min_columns:
        raise VcfFormatError("expected at least %d tab-separated columns, found %d: %r" % (min_columns, len(row), line[:200]))
    return row


def sample_names(header_line):
    ''' Sample names from the #CHROM column header line. '''
    row = header_line.rstrip('\r\n').split('\t')
    if not row[0].startswith('#CHROM'):
        raise VcfFormatError("not a #CHROM header line: %r" % header_line[:200])
    return row[len(VCF_FIXED_COLUMNS):]


def sample_indices(names, wanted):
    ''' Zero-based positions of the wanted sample names within names, in
        header order. Wanted names that are not present are ignored.
    '''
    wanted = set(wanted)
    missing = wanted - set(names)
    if missing:
        log.debug("samples not found in VCF header, ignoring: %s", ', '.join(sorted(missing)))
    return [i for i, name in enumerate(names) if name in wanted]


def snv_drop_reason(ref, alt):
    ''' Return 'multiallelic' or 'indel' if this REF/ALT pair is not a
        biallelic single-nucleotide variant, else None.
    '''
    if ',' in alt:
        return 'multiallelic'
    if len(ref) != 1 or len(alt) != 1:
        return 'indel'
    return None


def format_index(format_field, key):
    ''' Zero-based offset of the named sub-field in a colon-delimited FORMAT
        column. Raises VcfFormatError if it is absent.
    '''
    keys = format_field.split(':')
    if key not in keys:
        raise VcfFormatError("FORMAT %s has no %s sub-field" % (format_field, key))
    return keys.index(key)


def sample_subfield(sample_field, idx):
    ''' The idx'th colon-delimited sub-field of a sample column. Trailing
        sub-fields may be dropped in VCF, so a short sample column gives the
        missing value.
    '''
    fields = sample_field.split(':')
    if idx < len(fields):
        return fields[idx]
    return MISSING


def parse_genotype(gt):
    ''' Split a GT call into its allele tokens (on "/" or "|"). Returns None
        for a missing call (one whose first character is "."). Every token of
        any other call is kept, so "0/." gives ["0", "."].
    '''
    if not gt or gt.startswith(MISSING):
        return None
    return re.split(r'[/|]', gt)


def parse_allele_depth(ad):
    ''' Parse a biallelic AD sub-field "ref,alt" into a pair of ints. A
        missing value (".") means no reads: (0, 0).
    '''
    if ad == MISSING:
        return (0, 0)
    parts = ad.split(',')
    if len(parts) != 2:
        raise VcfFormatError("expected two allele depths (ref,alt), found %r" % ad)
    try:
        ref, alt = (int(x) if x != MISSING else 0 for x in parts)
    except ValueError:
        raise VcfFormatError("non-integer allele depth %r" % ad)
    if ref < 0 or alt < 0:
        raise VcfFormatError("negative allele depth %r" % ad)
    return (ref, alt)


def info_consequences(info):
    ''' The comma-separated consequence strings of the CSQ entry of an INFO
        column (text after the last "CSQ=" up to the next ";"). None if the
        INFO column carries no CSQ entry.
    '''
    start = info.rfind('CSQ=')
    if start < 0:
        return None
    csq = info[start + len('CSQ='):].split(';', 1)[0]
    return csq.split(',')
